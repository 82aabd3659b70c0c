"""
Configuration System
====================

Centralized, validated configuration management with typed dataclasses.
"""

import os
import re
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any, Union
import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ApiConfig:
    """Generative API endpoint and model identities."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    image_model: str = "gemini-2.5-flash-image-preview"
    text_to_image_model: str = "imagen-4.0-generate-001"
    video_model: str = "veo-2.0-generate-001"
    translation_model: str = "gemini-2.5-flash"
    request_timeout: Optional[float] = None

    def __post_init__(self):
        if not self.api_key:
            self.api_key = api_key_from_env()
        self.validate()

    def validate(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid base URL: {self.base_url}",
                config_key="api.base_url",
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError(
                f"request_timeout must be positive, got {self.request_timeout}",
                config_key="api.request_timeout",
            )


@dataclass
class ImageConfig:
    """Image generation settings."""

    min_payload_length: int = 200
    default_output_format: str = "image/jpeg"
    default_aspect_ratio: str = "1:1"

    VALID_OUTPUT_FORMATS = {"image/jpeg", "image/png", "image/webp"}

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.min_payload_length < 0:
            raise ConfigurationError(
                f"min_payload_length must be >= 0, got {self.min_payload_length}",
                config_key="image.min_payload_length",
            )
        if self.default_output_format not in self.VALID_OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Invalid output format: {self.default_output_format}",
                config_key="image.default_output_format",
            )


@dataclass
class VideoConfig:
    """Video job settings."""

    quality: str = "720p"
    aspect_ratio: str = "16:9"
    poll_interval: float = 10.0
    # None keeps polling until the provider reports completion
    max_wait: Optional[float] = None

    VALID_QUALITIES = {"720p", "1080p"}
    VALID_ASPECT_RATIOS = {"16:9", "9:16", "1:1"}

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.quality not in self.VALID_QUALITIES:
            raise ConfigurationError(
                f"Invalid video quality: {self.quality}",
                config_key="video.quality",
            )
        if self.aspect_ratio not in self.VALID_ASPECT_RATIOS:
            raise ConfigurationError(
                f"Invalid aspect ratio: {self.aspect_ratio}",
                config_key="video.aspect_ratio",
            )
        if self.poll_interval <= 0:
            raise ConfigurationError(
                f"poll_interval must be positive, got {self.poll_interval}",
                config_key="video.poll_interval",
            )
        if self.max_wait is not None and self.max_wait <= 0:
            raise ConfigurationError(
                f"max_wait must be positive, got {self.max_wait}",
                config_key="video.max_wait",
            )


@dataclass
class BatchConfig:
    """Batch runner and translation settings."""

    preset_id: str = "special-wedding"
    aspect_ratio: str = "16:9"
    locale: str = "en"
    generation_language: str = "en"

    VALID_LOCALES = {"en", "vi"}

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        for name in ("locale", "generation_language"):
            value = getattr(self, name)
            if value not in self.VALID_LOCALES:
                raise ConfigurationError(
                    f"Invalid {name}: {value}",
                    config_key=f"batch.{name}",
                )


# =============================================================================
# Main Configuration Class
# =============================================================================


@dataclass
class Config:
    """
    Main configuration container.

    Sections are validated on construction; unknown keys raise
    ConfigurationError instead of being silently dropped.
    """

    api: ApiConfig = field(default_factory=ApiConfig)
    image: ImageConfig = field(default_factory=ImageConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)

    SECTIONS = ("api", "image", "video", "batch")

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Config":
        """
        Load configuration from file with environment variable interpolation.

        Args:
            path: Path to a YAML config file, searched before the defaults

        Returns:
            Validated Config instance
        """
        search_paths = [
            Path("./config/defaults.yaml"),
            Path("./defaults.yaml"),
            Path.home() / ".magic-studio" / "config.yaml",
        ]

        if path:
            search_paths.insert(0, Path(path))

        config_data = {}

        for search_path in search_paths:
            if search_path.exists():
                logger.info(f"Loading config from: {search_path}")
                try:
                    with open(search_path, "r", encoding="utf-8") as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except yaml.YAMLError as e:
                    raise ConfigurationError(
                        f"Invalid YAML in config file: {e}",
                        config_key=str(search_path),
                    )
        else:
            logger.info("No config file found, using defaults")

        config_data = cls._interpolate_env_vars(config_data)

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary with validation."""
        unknown = set(data) - set(cls.SECTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unknown config sections: {', '.join(sorted(unknown))}"
            )
        try:
            return cls(
                api=ApiConfig(**(data.get("api") or {})),
                image=ImageConfig(**(data.get("image") or {})),
                video=VideoConfig(**(data.get("video") or {})),
                batch=BatchConfig(**(data.get("batch") or {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @staticmethod
    def _interpolate_env_vars(data: Any) -> Any:
        """Recursively interpolate ${VAR} and ${VAR:-default} patterns."""
        if isinstance(data, str):
            pattern = r"\$\{([^}:]+)(?::-([^}]*))?\}"

            def replace(match):
                var_name = match.group(1)
                default = match.group(2) or ""
                return os.environ.get(var_name, default)

            return re.sub(pattern, replace, data)
        elif isinstance(data, dict):
            return {k: Config._interpolate_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [Config._interpolate_env_vars(item) for item in data]
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary, with the API key masked."""
        result = {section: asdict(getattr(self, section)) for section in self.SECTIONS}
        if result["api"].get("api_key"):
            result["api"]["api_key"] = "***REDACTED***"
        return result


def api_key_from_env() -> Optional[str]:
    """Return the first API key found in the environment."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


# =============================================================================
# Convenience Functions
# =============================================================================


_global_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance (lazily loaded)."""
    global _global_config
    if _global_config is None:
        _global_config = Config.load()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset global configuration to None (forces reload on next access)."""
    global _global_config
    _global_config = None
