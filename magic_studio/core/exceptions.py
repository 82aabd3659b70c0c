"""
Custom Exceptions
=================

Unified exception hierarchy for the generation orchestration engine.

Every error surfaces to its immediate caller. Only the batch runner and the
fan-out join turn failures into recorded results.
"""

from typing import Optional, Dict, Any


AUTH_ERROR_MESSAGE = "API request failed. Please check your API key and quota."


class StudioError(Exception):
    """Base exception for all Magic Studio errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


class ConfigurationError(StudioError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details=details, **kwargs)


class ValidationError(StudioError):
    """Missing or malformed inputs, raised before any network call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]
        super().__init__(message, details=details, **kwargs)


class UnknownPresetError(ValidationError):
    """A directive was requested for a preset id that is not registered."""

    def __init__(self, preset_id: str):
        super().__init__(
            f"Unknown preset: {preset_id}",
            field="preset_id",
            value=preset_id,
        )
        self.preset_id = preset_id


class AuthError(StudioError):
    """Credential or quota rejection. Always carries the same user-facing message."""

    def __init__(self, status_code: Optional[int] = None):
        details = {}
        if status_code:
            details["status_code"] = status_code
        super().__init__(AUTH_ERROR_MESSAGE, details=details)
        self.status_code = status_code


class ProviderError(StudioError):
    """Non-success response from the generative API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body[:500]
        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code


class GenerationError(StudioError):
    """Base class for generation responses that carry nothing usable."""

    def __init__(
        self,
        message: str,
        prompt: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if prompt:
            details["prompt"] = prompt[:200]
        super().__init__(message, details=details, **kwargs)


class GenerationBlocked(GenerationError):
    """The provider safety-filtered the request."""

    def __init__(self, block_reason: str, **kwargs):
        super().__init__(
            f"Image generation failed due to: {block_reason}. "
            "Please modify your prompt or images.",
            **kwargs,
        )
        self.block_reason = block_reason
        self.details["block_reason"] = block_reason


class GenerationEmpty(GenerationError):
    """The provider returned no content parts."""

    def __init__(self, **kwargs):
        super().__init__(
            "Image generation failed. The prompt may have been blocked by safety "
            "settings or the API returned an empty response. Please try again.",
            **kwargs,
        )


class NoValidImage(GenerationError):
    """Content came back but no image payload passed the plausibility check."""

    def __init__(self, message: Optional[str] = None, **kwargs):
        super().__init__(
            message
            or "No valid image found in response. The result may have been "
            "empty or blocked by safety settings.",
            **kwargs,
        )


class VideoJobError(StudioError):
    """Terminal failure reported inside a completed video operation."""

    def __init__(
        self,
        message: str,
        operation_name: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation_name:
            details["operation_name"] = operation_name
        super().__init__(f"Video generation failed: {message}", details=details, **kwargs)
        self.provider_message = message


class NetworkFetchError(StudioError):
    """Non-success status while fetching a delivered media file."""

    def __init__(self, status_code: int, **kwargs):
        super().__init__(
            f"Failed to download video file. Status: {status_code}",
            details={"status_code": status_code},
            **kwargs,
        )
        self.status_code = status_code


class PollTimeoutError(StudioError):
    """A long-running operation did not finish within the configured wait."""

    def __init__(
        self,
        operation_name: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = {}
        if operation_name:
            details["operation_name"] = operation_name
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            f"Timeout after {timeout_seconds} seconds waiting for {operation_name}",
            details=details,
            recoverable=True,
            **kwargs,
        )


class OperationCancelled(StudioError):
    """The caller cancelled a job through its cancellation token."""
