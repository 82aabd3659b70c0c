"""
API Integration Layer
=====================

Clients for the generative media API.

Every client shares one ``ApiSession`` (HTTP client + credential) and routes
remote calls through an ``ApiGateway`` that turns auth/quota rejections into
``AuthError``.

Usage:
    from magic_studio.api import ApiSession, ImageGenClient

    async with ApiSession() as session:
        images = ImageGenClient(session)
        data_uri = await images.text_to_image("A lighthouse at dusk", aspect_ratio="16:9")
"""

from .base import ApiSession, ImagePart, TextPart, Part, as_part, build_parts
from .gateway import ApiGateway, AuthErrorClassifier
from .image import ImageGenClient, full_prompt
from .translate import Translator, LANGUAGE_NAMES
from .video import (
    VideoGenClient,
    VideoJob,
    VideoJobState,
    VideoJobDescriptor,
)

__all__ = [
    "ApiSession",
    "ImagePart",
    "TextPart",
    "Part",
    "as_part",
    "build_parts",
    "ApiGateway",
    "AuthErrorClassifier",
    "ImageGenClient",
    "full_prompt",
    "Translator",
    "LANGUAGE_NAMES",
    "VideoGenClient",
    "VideoJob",
    "VideoJobState",
    "VideoJobDescriptor",
]
