"""
Studio
======

Session-level entry point. Builds one API session and gateway from the
configuration and hands them to every client, so the credential and HTTP
connection pool are created once and shared.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import httpx

from .api.base import ApiSession
from .api.gateway import ApiGateway, AuthErrorClassifier
from .api.image import ImageGenClient
from .api.translate import Translator
from .api.video import Sleep, VideoGenClient
from .core.cancellation import CancellationToken
from .core.config import Config, get_config
from .presets.catalog import build_text_to_image_prompt
from .utils.image_utils import UploadedImagePayload
from .utils.media import MediaHandle
from .workflow.batch import BatchRunner
from .workflow.tools import StudioTools
from .workflow.variants import VariantGenerator

logger = logging.getLogger(__name__)


class Studio:
    """
    Main class for orchestrating generations in one session.

    Handles:
    - Client wiring over a shared session and gateway
    - Prompt translation for non-English locales
    - Preset-driven text-to-image and video generation
    - Single-shot image tools and lookbooks via ``tools``
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        classifier: Optional[AuthErrorClassifier] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the studio.

        Args:
            config: Configuration (defaults to the global config)
            http_client: Pre-built HTTP client, mainly for tests
            classifier: Auth/quota classifier for the gateway
            sleep: Sleep primitive used by the video polling loop
        """
        self.config = config or get_config()
        self.session = ApiSession.from_config(self.config.api, http_client=http_client)
        self.gateway = ApiGateway(classifier)

        self.images = ImageGenClient(
            self.session,
            self.gateway,
            api_config=self.config.api,
            image_config=self.config.image,
        )
        self.translator = Translator(self.session, self.gateway, api_config=self.config.api)
        self.videos = VideoGenClient(
            self.session,
            self.images,
            self.gateway,
            api_config=self.config.api,
            video_config=self.config.video,
            sleep=sleep,
        )
        self.variants = VariantGenerator(self.images, locale=self.config.batch.locale)
        self.tools = StudioTools(
            self.images,
            self.translator,
            locale=self.config.batch.locale,
            generation_language=self.config.batch.generation_language,
            default_output_format=self.config.image.default_output_format,
        )

        logger.info("Studio initialized")
        logger.info(f"  Locale: {self.config.batch.locale}")
        logger.info(f"  Video model: {self.config.api.video_model}")

    @classmethod
    def from_file(cls, config_path: Union[str, Path], **kwargs) -> "Studio":
        return cls(Config.load(config_path), **kwargs)

    @property
    def locale(self) -> str:
        return self.config.batch.locale

    async def _to_generation_language(self, text: str) -> str:
        return await self.translator.translate_if_needed(
            text, self.locale, self.config.batch.generation_language
        )

    def batch_runner(self) -> BatchRunner:
        """A batch runner over this session's clients and batch settings."""
        return BatchRunner(self.images, self.translator, self.config.batch)

    async def generate_from_text(
        self,
        prompt: str,
        preset_id: str,
        negative_prompt: str = "",
        aspect_ratio: Optional[str] = None,
        output_format: Optional[str] = None,
        beauty: Optional[str] = None,
    ) -> str:
        """
        Preset-driven text-to-image generation.

        Args:
            prompt: User prompt, in the active locale
            preset_id: Preset whose directive prefixes the prompt
            negative_prompt: Things to avoid, in the active locale
            aspect_ratio: Requested ratio ("auto" means the square default)
            output_format: Output MIME type
            beauty: Optional beauty override

        Returns:
            The generated image as a data URI
        """
        positive = await self._to_generation_language(prompt)
        negative = await self._to_generation_language(negative_prompt)

        full = build_text_to_image_prompt(positive, preset_id, beauty=beauty, locale=self.locale)
        return await self.images.text_to_image(full, negative, aspect_ratio, output_format)

    async def generate_video(
        self,
        prompt: str,
        subject_image: Optional[UploadedImagePayload] = None,
        context_image: Optional[UploadedImagePayload] = None,
        quality: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        token: Optional[CancellationToken] = None,
    ) -> MediaHandle:
        """Translate the prompt if needed, then run a video job to completion."""
        job = self.videos.create_job(prompt, subject_image, context_image, quality, aspect_ratio)
        job.prompt = await self._to_generation_language(prompt)
        return await self.videos.run(job, token=token)

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
