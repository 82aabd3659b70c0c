"""
Studio Tools
============

Single-shot image tools built on the preset directive: pose transfer,
virtual try-on, prop fusion, product placement, subject/background design
and super-resolution upscale. Also the multi-page lookbook, which runs its
pages one at a time and stops at the first failure.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..api.image import ImageGenClient
from ..api.translate import Translator
from ..core.cancellation import CancellationToken
from ..core.exceptions import ConfigurationError, ValidationError
from ..presets.catalog import (
    CONTROL_MODES,
    DEFAULT_SKIN_STYLE,
    LOOKBOOK_MAX_PAGES,
    LOOKBOOK_NEGATIVE_PROMPT,
    LOOKBOOK_ORIENTATIONS,
    LOOKBOOK_THEMES,
    UPSCALE_FORMULA,
    UPSCALE_STAGES,
    build_design_prompt,
    build_lookbook_prompt,
    build_pose_prompt,
    build_product_placement_prompt,
    build_prop_fusion_prompt,
    build_stylist_prompt,
    build_upscale_prompt,
)
from ..utils.image_utils import (
    UploadedImagePayload,
    get_image_dimensions,
    reduced_aspect_ratio,
)

logger = logging.getLogger(__name__)


@dataclass
class LookbookReport:
    """Pages generated so far, in page order."""

    page_count: int
    pages: List[str] = field(default_factory=list)
    error: Optional[str] = None
    failed_page: Optional[int] = None
    cancelled: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def complete(self) -> bool:
        return len(self.pages) == self.page_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_count": self.page_count,
            "generated": len(self.pages),
            "error": self.error,
            "failed_page": self.failed_page,
            "cancelled": self.cancelled,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


PageCallback = Callable[[int, str], None]


def _require(image: Optional[UploadedImagePayload], message: str, field_name: str) -> None:
    if image is None:
        raise ValidationError(message, field=field_name)


class StudioTools:
    """
    One-call image tools over a shared image client.

    Positive/negative hints (and the stylist scene) are translated to the
    generation language first when the locale differs.
    """

    def __init__(
        self,
        image_client: ImageGenClient,
        translator: Optional[Translator] = None,
        locale: str = "en",
        generation_language: str = "en",
        default_output_format: str = "image/jpeg",
    ):
        self.image_client = image_client
        self.translator = translator
        self.locale = locale
        self.generation_language = generation_language
        self.default_output_format = default_output_format

        if locale != generation_language and translator is None:
            raise ConfigurationError(
                f"Locale {locale!r} differs from generation language "
                f"{generation_language!r} but no translator was given",
                config_key="batch.locale",
            )

    async def _translate(self, text: str) -> str:
        if self.translator is None:
            return text
        return await self.translator.translate_if_needed(
            text, self.locale, self.generation_language
        )

    async def _hints(self, positive: str, negative: str):
        return await self._translate(positive), await self._translate(negative)

    # -------------------------------------------------------------------------
    # Preset-directive tools
    # -------------------------------------------------------------------------

    async def pose(
        self,
        character: Optional[UploadedImagePayload],
        pose_reference: Optional[UploadedImagePayload],
        preset_id: str,
        positive: str = "",
        negative: str = "",
        control_mode: str = "Pose",
        aspect_ratio: Optional[str] = "auto",
        beauty: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> str:
        """
        Re-render the character in the pose (or edges/depth) of a reference.

        Args:
            character: Subject image, sent first
            pose_reference: Reference sketch or photo, sent second
            preset_id: Preset for the directive
            positive: Extra details
            negative: Things to avoid
            control_mode: One of ``CONTROL_MODES``
            aspect_ratio: Ratio override ("auto" keeps the preset's)
            beauty: Optional beauty override
            output_format: Output MIME type

        Returns:
            Generated image as a data URI
        """
        _require(character, "Please upload the character image", "character")
        _require(pose_reference, "Please upload the pose reference", "pose_reference")
        if control_mode not in CONTROL_MODES:
            raise ValidationError(f"Unknown control mode: {control_mode}", field="control_mode")

        positive, negative = await self._hints(positive, negative)
        prompt = build_pose_prompt(
            preset_id,
            positive,
            negative,
            control_mode=control_mode,
            aspect_ratio=aspect_ratio,
            beauty=beauty,
            output_format=output_format or self.default_output_format,
        )
        logger.info(f"Pose transfer with preset {preset_id} ({control_mode})")
        return await self.image_client.edit_images([character, pose_reference, prompt])

    async def prop_fusion(
        self,
        character: Optional[UploadedImagePayload],
        prop: Optional[UploadedImagePayload],
        preset_id: str,
        positive: str = "",
        negative: str = "",
        aspect_ratio: Optional[str] = "auto",
        beauty: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> str:
        """Blend the object from ``prop`` into the character/scene image."""
        _require(character, "Please upload the character image", "character")
        _require(prop, "Please upload the prop image", "prop")

        positive, negative = await self._hints(positive, negative)
        prompt = build_prop_fusion_prompt(
            preset_id,
            positive,
            negative,
            aspect_ratio=aspect_ratio,
            beauty=beauty,
            output_format=output_format or self.default_output_format,
        )
        logger.info(f"Prop fusion with preset {preset_id}")
        return await self.image_client.edit_images([character, prop, prompt])

    async def product_placement(
        self,
        scene: Optional[UploadedImagePayload],
        product: Optional[UploadedImagePayload],
        preset_id: str,
        positive: str = "",
        negative: str = "",
        aspect_ratio: Optional[str] = "auto",
        output_format: Optional[str] = None,
    ) -> str:
        _require(scene, "Please upload the scene image", "scene")
        _require(product, "Please upload the product image", "product")

        positive, negative = await self._hints(positive, negative)
        prompt = build_product_placement_prompt(
            preset_id,
            positive,
            negative,
            aspect_ratio=aspect_ratio,
            output_format=output_format or self.default_output_format,
        )
        logger.info(f"Product placement with preset {preset_id}")
        return await self.image_client.edit_images([scene, product, prompt])

    async def design(
        self,
        subject: Optional[UploadedImagePayload],
        background: Optional[UploadedImagePayload],
        preset_id: str,
        positive: str = "",
        negative: str = "",
        aspect_ratio: Optional[str] = "auto",
        beauty: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> str:
        """Place ``subject`` into ``background`` in the preset's style."""
        _require(subject, "Please upload the subject image", "subject")
        _require(background, "Please upload the background image", "background")

        positive, negative = await self._hints(positive, negative)
        prompt = build_design_prompt(
            preset_id,
            positive,
            negative,
            aspect_ratio=aspect_ratio,
            beauty=beauty,
            output_format=output_format or self.default_output_format,
        )
        logger.info(f"Design composition with preset {preset_id}")
        return await self.image_client.edit_images([subject, background, prompt])

    # -------------------------------------------------------------------------
    # Try-on and upscale
    # -------------------------------------------------------------------------

    async def stylist(
        self,
        model: Optional[UploadedImagePayload],
        accessories: Sequence[UploadedImagePayload] = (),
        scene_description: str = "",
        positive: str = "",
        negative: str = "",
    ) -> str:
        """
        Dress ``model`` with ``accessories`` and place them in a scene.

        The output keeps the model image's exact aspect ratio.
        """
        _require(model, "Please upload the main character image", "model")
        if not accessories and not scene_description.strip():
            raise ValidationError(
                "Upload at least one accessory or describe a scene",
                field="accessories",
            )

        positive, negative = await self._hints(positive, negative)
        scene_description = await self._translate(scene_description)
        aspect_ratio = reduced_aspect_ratio(*get_image_dimensions(model))

        prompt = build_stylist_prompt(aspect_ratio, scene_description, positive, negative)
        logger.info(f"Styling with {len(accessories)} accessories at {aspect_ratio}")
        return await self.image_client.edit_images([model, *accessories, prompt])

    async def upscale(
        self,
        source: Optional[UploadedImagePayload],
        level: str = "4x",
        skin_style: str = DEFAULT_SKIN_STYLE,
        positive: str = "",
        negative: str = "",
    ) -> str:
        """
        Super-resolution upscale by ``level`` ("2x", "4x" or "8x").

        The target resolution is the source size times the level.
        """
        _require(source, "Please upload the source image", "source")
        if level not in UPSCALE_STAGES:
            raise ValidationError(f"Unknown upscale level: {level}", field="level")
        if skin_style not in UPSCALE_FORMULA.skin_library:
            raise ValidationError(f"Unknown skin style: {skin_style}", field="skin_style")

        positive, negative = await self._hints(positive, negative)
        width, height = get_image_dimensions(source)
        prompt = build_upscale_prompt(width, height, level, skin_style, positive, negative)
        logger.info(f"Upscaling {width}x{height} by {level} ({skin_style})")
        return await self.image_client.edit_images([source, prompt])

    # -------------------------------------------------------------------------
    # Lookbook
    # -------------------------------------------------------------------------

    async def lookbook(
        self,
        images: Sequence[UploadedImagePayload],
        theme: str = "wedding",
        orientation: str = "portrait",
        page_count: int = 4,
        page_text: str = "",
        positive: str = "",
        negative: str = LOOKBOOK_NEGATIVE_PROMPT,
        token: Optional[CancellationToken] = None,
        on_page: Optional[PageCallback] = None,
    ) -> LookbookReport:
        """
        Generate lookbook pages one at a time.

        ``page_count`` is clamped to 1..``LOOKBOOK_MAX_PAGES``. Line ``i`` of
        ``page_text`` (blank lines dropped) is the content of page ``i``.
        The first failed page ends the run; pages already generated are kept
        and the error is recorded on the report.

        Args:
            images: At least two photos, all sent with every page
            theme: Key of ``LOOKBOOK_THEMES``
            orientation: "portrait" or "landscape"
            page_count: Requested number of pages
            page_text: One "TITLE // BODY" line per page
            positive: Extra details
            negative: Extra things to avoid
            token: Checked before each page
            on_page: Called with (page_number, data_uri) per finished page

        Returns:
            LookbookReport
        """
        images = list(images)
        if len(images) < 2:
            raise ValidationError("Upload at least two images", field="images")
        if theme not in LOOKBOOK_THEMES:
            raise ValidationError(f"Unknown lookbook theme: {theme}", field="theme")
        if orientation not in LOOKBOOK_ORIENTATIONS:
            raise ValidationError(f"Unknown orientation: {orientation}", field="orientation")

        token = token or CancellationToken()
        page_count = max(1, min(page_count, LOOKBOOK_MAX_PAGES))
        contents = [line for line in page_text.splitlines() if line.strip()]
        positive, negative = await self._hints(positive, negative)
        report = LookbookReport(page_count=page_count)

        logger.info(f"Starting {page_count}-page {theme} lookbook")
        for page_number in range(1, page_count + 1):
            if token.cancelled:
                logger.info(f"Lookbook stopped before page {page_number}/{page_count}")
                report.cancelled = True
                break

            try:
                prompt = build_lookbook_prompt(
                    page_number,
                    page_count,
                    theme=theme,
                    orientation=orientation,
                    page_content=contents[page_number - 1] if page_number <= len(contents) else "",
                    positive=positive,
                    negative=negative,
                    locale=self.locale,
                )
                page = await self.image_client.edit_images(images + [prompt])
            except Exception as e:
                logger.error(f"Lookbook page {page_number}/{page_count} failed: {e}")
                report.error = str(e) or "Generation failed"
                report.failed_page = page_number
                break

            report.pages.append(page)
            if on_page is not None:
                on_page(page_number, page)

        report.completed_at = datetime.now()
        logger.info(f"Lookbook finished: {len(report.pages)}/{page_count} pages")
        return report
