"""
Batch Runner
============

Runs a list of prompts against one fixed character/background pair, strictly
one generation at a time and in input order.

A failing item is recorded and the run moves on. A cancellation token is
checked before each item; results already produced are kept.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..api.image import ImageGenClient
from ..api.translate import Translator
from ..core.cancellation import CancellationToken
from ..core.config import BatchConfig
from ..core.exceptions import ConfigurationError, ValidationError
from ..presets.catalog import build_batch_prompt
from ..presets.registry import PRESETS
from ..utils.image_utils import UploadedImagePayload

logger = logging.getLogger(__name__)


class BatchItemState(Enum):
    """Lifecycle of one batch item."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class BatchItem:
    """One prompt of a batch and its outcome."""

    prompt: str
    state: BatchItemState = BatchItemState.PENDING
    result: Optional[str] = None  # data URI
    error: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.state in (BatchItemState.SUCCEEDED, BatchItemState.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "state": self.state.value,
            "result": self.result,
            "error": self.error,
        }


@dataclass
class BatchReport:
    """All items of a run, in input order."""

    items: List[BatchItem] = field(default_factory=list)
    cancelled: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def results(self) -> List[BatchItem]:
        """Items that were attempted, succeeded or failed."""
        return [item for item in self.items if item.finished]

    @property
    def succeeded(self) -> List[BatchItem]:
        return [item for item in self.items if item.state is BatchItemState.SUCCEEDED]

    @property
    def failed(self) -> List[BatchItem]:
        return [item for item in self.items if item.state is BatchItemState.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "cancelled": self.cancelled,
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


ProgressCallback = Callable[[int, int], None]
ResultCallback = Callable[[BatchItem], None]


def split_prompts(prompts: Union[str, Sequence[str]]) -> List[str]:
    """One prompt per non-blank line."""
    lines = prompts.splitlines() if isinstance(prompts, str) else list(prompts)
    return [line for line in lines if line and line.strip()]


class BatchRunner:
    """
    Sequential driver over a prompt list.

    At most one generation is in flight at any time. Each item optionally
    translates its prompt, composes the fixed-preset directive, and sends
    character, background and directive as one edit request.
    """

    def __init__(
        self,
        image_client: ImageGenClient,
        translator: Optional[Translator] = None,
        config: Optional[BatchConfig] = None,
    ):
        self.image_client = image_client
        self.translator = translator
        self.config = config or BatchConfig()

        if self.config.preset_id not in PRESETS:
            raise ConfigurationError(
                f"Unknown batch preset: {self.config.preset_id}",
                config_key="batch.preset_id",
            )
        if self.needs_translation and translator is None:
            raise ConfigurationError(
                f"Locale {self.config.locale!r} differs from generation language "
                f"{self.config.generation_language!r} but no translator was given",
                config_key="batch.locale",
            )

    @property
    def needs_translation(self) -> bool:
        return self.config.locale != self.config.generation_language

    def validate(
        self,
        prompts: Union[str, Sequence[str]],
        character: Optional[UploadedImagePayload],
        background: Optional[UploadedImagePayload],
    ) -> List[str]:
        """Preflight checks; nothing is sent and nothing is mutated."""
        if character is None or background is None:
            raise ValidationError(
                "Both a character asset and a background asset are required",
                field="character" if character is None else "background",
            )
        prompt_list = split_prompts(prompts)
        if not prompt_list:
            raise ValidationError("At least one non-empty prompt is required", field="prompts")
        return prompt_list

    async def run(
        self,
        prompts: Union[str, Sequence[str]],
        character: Optional[UploadedImagePayload],
        background: Optional[UploadedImagePayload],
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> BatchReport:
        """
        Run every prompt in order.

        Args:
            prompts: Prompt list, or newline-separated text
            character: First image of every request
            background: Second image of every request
            token: Cancellation token checked before each item
            on_progress: Called with (index, total), 1-based, before each attempt
            on_result: Called with each finished item

        Returns:
            BatchReport with one item per prompt; unattempted items stay PENDING

        Raises:
            ValidationError: Missing assets or no prompts (before any network call)
        """
        prompt_list = self.validate(prompts, character, background)
        token = token if token is not None else CancellationToken()

        report = BatchReport(items=[BatchItem(prompt=p) for p in prompt_list])
        total = report.total
        logger.info(f"Starting batch of {total} prompts with preset {self.config.preset_id}")

        for index, item in enumerate(report.items, start=1):
            if token.cancelled:
                logger.info(f"Batch stopped before item {index}/{total}")
                report.cancelled = True
                break

            if on_progress is not None:
                on_progress(index, total)

            item.state = BatchItemState.RUNNING
            try:
                item.result = await self._generate(item.prompt, character, background)
                item.state = BatchItemState.SUCCEEDED
            except Exception as e:
                logger.error(f"Failed to generate for prompt {item.prompt!r}: {e}")
                item.error = str(e) or "Generation failed"
                item.state = BatchItemState.FAILED

            if on_result is not None:
                on_result(item)

        report.completed_at = datetime.now()
        logger.info(
            f"Batch finished: {len(report.succeeded)} succeeded, "
            f"{len(report.failed)} failed, cancelled={report.cancelled}"
        )
        return report

    async def _generate(
        self,
        prompt: str,
        character: UploadedImagePayload,
        background: UploadedImagePayload,
    ) -> str:
        text = prompt
        if self.needs_translation:
            text = await self.translator.translate_if_needed(
                prompt,
                self.config.locale,
                self.config.generation_language,
            )

        directive = build_batch_prompt(text, self.config.preset_id, self.config.aspect_ratio)
        return await self.image_client.edit_images([character, background, directive])
