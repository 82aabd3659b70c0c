"""
Core Module
===========

Configuration, exceptions, cancellation and security helpers.
"""

from .config import (
    Config,
    ApiConfig,
    ImageConfig,
    VideoConfig,
    BatchConfig,
    get_config,
    set_config,
    reset_config,
)
from .cancellation import CancellationToken
from .exceptions import (
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
from .security import redact_api_key, sanitize_filename

__all__ = [
    # Configuration
    "Config",
    "ApiConfig",
    "ImageConfig",
    "VideoConfig",
    "BatchConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Cancellation
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
    # Security
    "redact_api_key",
    "sanitize_filename",
]
