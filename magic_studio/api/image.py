"""
Image Generation Client
=======================

Multi-part image edit/composite requests and single text-to-image requests.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ..core.config import ApiConfig, ImageConfig
from ..core.exceptions import (
    GenerationBlocked,
    GenerationEmpty,
    NoValidImage,
)
from .base import ApiSession, PartLike, build_parts
from .gateway import ApiGateway

logger = logging.getLogger(__name__)


NEGATIVE_DELIMITER = " | Negative: "


class ImageGenClient:
    """
    Image generation against the generative API.

    Every remote call goes through the gateway, so auth/quota failures come
    back as ``AuthError``.
    """

    def __init__(
        self,
        session: ApiSession,
        gateway: Optional[ApiGateway] = None,
        api_config: Optional[ApiConfig] = None,
        image_config: Optional[ImageConfig] = None,
    ):
        self.session = session
        self.gateway = gateway or ApiGateway()
        self.api_config = api_config or ApiConfig(api_key=session.api_key)
        self.image_config = image_config or ImageConfig()

    # -------------------------------------------------------------------------
    # Image edit / composite
    # -------------------------------------------------------------------------

    async def edit_images(self, parts: Sequence[PartLike]) -> str:
        """
        Send an ordered list of image/text parts and return the first image.

        Args:
            parts: Image payloads and text segments, in request order

        Returns:
            The generated image as a data URI

        Raises:
            GenerationBlocked: The provider reported a block reason
            GenerationEmpty: No content parts came back
            NoValidImage: Content came back but no image passed the size check
        """
        request_parts = build_parts(parts)
        return await self.gateway.invoke(lambda: self._edit_images(request_parts))

    async def _edit_images(self, request_parts) -> str:
        model = self.api_config.image_model
        payload = {
            "contents": [{"parts": [part.to_api() for part in request_parts]}],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }

        logger.info(f"Generating image with {model} ({len(request_parts)} parts)")
        data = await self.session.post_json(f"models/{model}:generateContent", payload)
        return self.extract_image(data)

    def extract_image(self, data: Dict[str, Any]) -> str:
        """Pick the first plausible inline image out of a generateContent response."""
        candidates = data.get("candidates") or []
        content = (candidates[0].get("content") if candidates else None) or {}
        content_parts = content.get("parts") or []

        if not content_parts:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                logger.warning(f"Image generation blocked: {block_reason}")
                raise GenerationBlocked(block_reason)
            raise GenerationEmpty()

        threshold = self.image_config.min_payload_length
        for part in content_parts:
            inline = part.get("inlineData") or part.get("inline_data") or {}
            encoded = inline.get("data") or ""
            if len(encoded) > threshold:
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                return f"data:{mime_type};base64,{encoded}"

        raise NoValidImage()

    # -------------------------------------------------------------------------
    # Text to image
    # -------------------------------------------------------------------------

    async def text_to_image(
        self,
        prompt: str,
        negative_prompt: str = "",
        aspect_ratio: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> str:
        """
        Generate exactly one image from a text prompt.

        Args:
            prompt: Positive prompt
            negative_prompt: Things to avoid, appended after a fixed delimiter
            aspect_ratio: Requested ratio; "auto" falls back to the square default
            output_format: Output MIME type

        Returns:
            The generated image as a data URI
        """
        return await self.gateway.invoke(
            lambda: self._text_to_image(prompt, negative_prompt, aspect_ratio, output_format)
        )

    async def _text_to_image(
        self,
        prompt: str,
        negative_prompt: str,
        aspect_ratio: Optional[str],
        output_format: Optional[str],
    ) -> str:
        model = self.api_config.text_to_image_model
        mime_type = output_format or self.image_config.default_output_format
        if not aspect_ratio or aspect_ratio == "auto":
            aspect_ratio = self.image_config.default_aspect_ratio

        payload = {
            "instances": [{"prompt": full_prompt(prompt, negative_prompt)}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
                "outputOptions": {"mimeType": mime_type},
            },
        }

        logger.info(f"Generating image from text with {model} at {aspect_ratio}")
        data = await self.session.post_json(f"models/{model}:predict", payload)

        for prediction in data.get("predictions") or []:
            encoded = prediction.get("bytesBase64Encoded")
            if encoded:
                return f"data:{mime_type};base64,{encoded}"

        raise NoValidImage("No image found in text-to-image response")


def full_prompt(prompt: str, negative_prompt: str = "") -> str:
    """Prompt and negative prompt joined with the fixed delimiter."""
    if negative_prompt:
        return f"{prompt}{NEGATIVE_DELIMITER}{negative_prompt}"
    return prompt
