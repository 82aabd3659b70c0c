"""
Variant Generator
=================

Generates several trend or comic-style variants of one input image at once,
using the fan-out join.
"""

import logging
from typing import Optional, Sequence

from ..api.image import ImageGenClient
from ..core.exceptions import ValidationError
from ..presets.catalog import COMIC_STYLES, TRENDS, build_comic_prompt, build_trend_prompt
from ..utils.image_utils import UploadedImagePayload
from .fanout import FanOutResult, fan_out

logger = logging.getLogger(__name__)


class VariantGenerator:
    """Trend and comic-style fan-outs over one subject image."""

    def __init__(self, image_client: ImageGenClient, locale: str = "en"):
        self.image_client = image_client
        self.locale = locale

    async def generate_trend_variants(
        self,
        subject: Optional[UploadedImagePayload],
        trend_keys: Sequence[str],
        partner: Optional[UploadedImagePayload] = None,
        aspect_ratio: str = "1:1",
        negative_prompt: str = "",
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> FanOutResult:
        """
        One image per selected trend, generated concurrently.

        Args:
            subject: Main subject image
            trend_keys: Keys from ``TRENDS``
            partner: Optional second subject, combined as a couple
            aspect_ratio: Requested output ratio
            negative_prompt: Extra things to avoid
            name: Optional title hint
            description: Optional description hint

        Returns:
            FanOutResult keyed by trend key
        """
        if subject is None:
            raise ValidationError("Please upload the main subject", field="subject")
        if not trend_keys:
            raise ValidationError("Select at least one trend", field="trend_keys")
        unknown = [key for key in trend_keys if key not in TRENDS]
        if unknown:
            raise ValidationError(f"Unknown trends: {', '.join(unknown)}", field="trend_keys")

        images = [subject] if partner is None else [subject, partner]

        def branch(trend_key):
            prompt = build_trend_prompt(
                trend_key,
                aspect_ratio,
                has_partner=partner is not None,
                locale=self.locale,
                negative_prompt=negative_prompt,
                name=name,
                description=description,
            )
            return lambda: self.image_client.edit_images(images + [prompt])

        logger.info(f"Generating {len(trend_keys)} trend variants")
        return await fan_out({key: branch(key) for key in dict.fromkeys(trend_keys)})

    async def generate_comic_variants(
        self,
        subject: Optional[UploadedImagePayload],
        styles: Optional[Sequence[str]] = None,
    ) -> FanOutResult:
        """One image per comic style (all of ``COMIC_STYLES`` by default)."""
        if subject is None:
            raise ValidationError("Please upload an image", field="subject")
        styles = list(styles) if styles else list(COMIC_STYLES)
        unknown = [style for style in styles if style not in COMIC_STYLES]
        if unknown:
            raise ValidationError(f"Unknown comic styles: {', '.join(unknown)}", field="styles")

        def branch(style):
            prompt = build_comic_prompt(style)
            return lambda: self.image_client.edit_images([subject, prompt])

        logger.info(f"Generating {len(styles)} comic style variants")
        return await fan_out({style: branch(style) for style in styles})
