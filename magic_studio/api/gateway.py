"""
API Gateway
===========

Single choke point for remote calls. Each action runs exactly once; failures
that look like credential or quota rejections are reclassified as
``AuthError`` and everything else propagates untouched.

Retry policy belongs to the caller.
"""

import logging
from typing import Awaitable, Callable, FrozenSet, Iterable, Optional, TypeVar

from ..core.exceptions import AuthError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthErrorClassifier:
    """
    Decides whether an exception is an auth/quota rejection.

    Provider heuristics live here so call sites never sniff messages
    themselves. Subclass or pass different markers to adapt to another
    provider.
    """

    DEFAULT_MESSAGE_MARKERS = ("api key not valid", "permission denied", "429")
    DEFAULT_STATUS_CODES = frozenset({400, 403, 429})

    def __init__(
        self,
        message_markers: Optional[Iterable[str]] = None,
        status_codes: Optional[Iterable[int]] = None,
    ):
        if message_markers is None:
            message_markers = self.DEFAULT_MESSAGE_MARKERS
        self.message_markers = tuple(marker.lower() for marker in message_markers)
        self.status_codes: FrozenSet[int] = frozenset(
            status_codes if status_codes is not None else self.DEFAULT_STATUS_CODES
        )

    @staticmethod
    def status_of(error: BaseException) -> Optional[int]:
        """Numeric status carried by the error or by its cause."""
        for candidate in (error, error.__cause__):
            if candidate is None:
                continue
            for attr in ("status_code", "status"):
                value = getattr(candidate, attr, None)
                if isinstance(value, int) and not isinstance(value, bool):
                    return value
            response = getattr(candidate, "response", None)
            value = getattr(response, "status_code", None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None

    def is_auth_error(self, error: BaseException) -> bool:
        message = str(error).lower()
        if any(marker in message for marker in self.message_markers):
            return True
        return self.status_of(error) in self.status_codes


class ApiGateway:
    """Wraps remote actions and reclassifies auth/quota failures."""

    def __init__(self, classifier: Optional[AuthErrorClassifier] = None):
        self.classifier = classifier or AuthErrorClassifier()

    async def invoke(self, action: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``action`` once.

        Args:
            action: Zero-argument callable returning an awaitable

        Returns:
            Whatever the action returns

        Raises:
            AuthError: If the failure is classified as an auth/quota rejection
        """
        try:
            return await action()
        except AuthError:
            raise
        except Exception as e:
            if self.classifier.is_auth_error(e):
                status = self.classifier.status_of(e)
                logger.error(f"Auth/quota rejection from API (status={status})")
                raise AuthError(status_code=status) from e
            raise

