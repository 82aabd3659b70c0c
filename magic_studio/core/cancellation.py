"""
Cooperative Cancellation
========================

An explicit token threaded through long-running workflows. Nothing is
interrupted mid-flight: holders check the token at well-defined points
(between batch items, between video polls).
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """A one-way flag; once cancelled it stays cancelled."""

    def __init__(self):
        self._cancelled = False
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "stop requested") -> None:
        if not self._cancelled:
            logger.info(f"Cancellation requested: {reason}")
        self._cancelled = True
        self._reason = self._reason or reason
