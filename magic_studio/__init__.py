"""
Magic Studio
============

Client-side orchestration for generative image and video models.

Features:
- Preset-driven directive composition (31 photographic presets)
- Image edit/composite and text-to-image generation
- Long-running video jobs with optional subject/context fusion
- Sequential batch generation with cooperative cancellation
- Concurrent trend and comic-style variant fan-outs
- Pose, try-on, prop, product, design, upscale and lookbook tools
- Aspect-ratio padding for source images

Quick Start:
    from magic_studio import Studio, UploadedImagePayload

    async with Studio() as studio:
        report = await studio.batch_runner().run(
            "walking on the beach\\ndancing in the rain",
            character=UploadedImagePayload.from_path("refs/couple.png"),
            background=UploadedImagePayload.from_path("refs/venue.jpg"),
        )
        for item in report.items:
            print(item.prompt, item.state.value)
"""

__version__ = "0.1.0"

from .studio import Studio

from .core.config import Config, get_config
from .core.cancellation import CancellationToken
from .core.exceptions import (
    StudioError,
    ConfigurationError,
    ValidationError,
    UnknownPresetError,
    AuthError,
    ProviderError,
    GenerationError,
    GenerationBlocked,
    GenerationEmpty,
    NoValidImage,
    VideoJobError,
    NetworkFetchError,
    PollTimeoutError,
    OperationCancelled,
)

from .presets import DirectiveOverrides, compose, PRESETS, TRENDS, COMIC_STYLES
from .api import ApiSession, ApiGateway, ImageGenClient, VideoGenClient, Translator
from .workflow import BatchRunner, BatchReport, VariantGenerator, StudioTools, fan_out
from .utils import UploadedImagePayload, MediaHandle, resize_to_aspect

__all__ = [
    "__version__",
    "Studio",
    # Core
    "Config",
    "get_config",
    "CancellationToken",
    # Exceptions
    "StudioError",
    "ConfigurationError",
    "ValidationError",
    "UnknownPresetError",
    "AuthError",
    "ProviderError",
    "GenerationError",
    "GenerationBlocked",
    "GenerationEmpty",
    "NoValidImage",
    "VideoJobError",
    "NetworkFetchError",
    "PollTimeoutError",
    "OperationCancelled",
    # Presets
    "DirectiveOverrides",
    "compose",
    "PRESETS",
    "TRENDS",
    "COMIC_STYLES",
    # API
    "ApiSession",
    "ApiGateway",
    "ImageGenClient",
    "VideoGenClient",
    "Translator",
    # Workflow
    "BatchRunner",
    "BatchReport",
    "VariantGenerator",
    "StudioTools",
    "fan_out",
    # Utils
    "UploadedImagePayload",
    "MediaHandle",
    "resize_to_aspect",
]
