"""Tests for workflow.batch.BatchRunner."""

import asyncio

import pytest

from magic_studio.api.base import ImagePart
from magic_studio.core.cancellation import CancellationToken
from magic_studio.core.config import BatchConfig
from magic_studio.core.exceptions import (
    ConfigurationError,
    NoValidImage,
    ProviderError,
    ValidationError,
)
from magic_studio.workflow.batch import BatchItemState, BatchRunner, split_prompts


class RecordingImageClient:
    """Stands in for ImageGenClient; fails on prompts listed in ``fail_on``."""

    def __init__(self, fail_on=(), on_call=None):
        self.fail_on = set(fail_on)
        self.on_call = on_call
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def edit_images(self, parts):
        self.calls.append(list(parts))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.on_call is not None:
                self.on_call(len(self.calls))
            directive = parts[-1]
            if any(f"Positive: {prompt}\n" in directive for prompt in self.fail_on):
                raise NoValidImage()
            return f"data:image/png;base64,result{len(self.calls)}"
        finally:
            self.in_flight -= 1


class FakeTranslator:
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []

    async def translate_if_needed(self, text, locale, target_locale="en"):
        self.calls.append((text, locale, target_locale))
        if text in self.fail_on:
            raise ProviderError("translation quota exceeded")
        return f"EN({text})"


class TestBatchRunner:
    @pytest.fixture(autouse=True)
    def setup_runner(self, subject, context):
        self.character = subject
        self.background = context
        self.client = RecordingImageClient()
        self.runner = BatchRunner(self.client)

    def run(self, prompts, runner=None, **kwargs):
        runner = runner or self.runner
        return asyncio.run(runner.run(prompts, self.character, self.background, **kwargs))

    # -------------------------------------------------------------------------
    # Preflight
    # -------------------------------------------------------------------------

    def test_missing_background(self):
        with pytest.raises(ValidationError):
            asyncio.run(self.runner.run("a prompt", self.character, None))
        assert self.client.calls == []

    def test_missing_character(self):
        with pytest.raises(ValidationError):
            asyncio.run(self.runner.run("a prompt", None, self.background))
        assert self.client.calls == []

    def test_blank_prompts(self):
        with pytest.raises(ValidationError):
            self.run("\n   \n\t\n")
        assert self.client.calls == []

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError):
            BatchRunner(self.client, config=BatchConfig(preset_id="no-such-preset"))

    def test_translation_needs_translator(self):
        with pytest.raises(ConfigurationError):
            BatchRunner(self.client, config=BatchConfig(locale="vi"))

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def test_sequential_in_order(self):
        report = self.run("first\n\nsecond\nthird")

        assert [item.prompt for item in report.items] == ["first", "second", "third"]
        assert [item.result for item in report.items] == [
            "data:image/png;base64,result1",
            "data:image/png;base64,result2",
            "data:image/png;base64,result3",
        ]
        assert self.client.max_in_flight == 1
        assert report.cancelled is False
        assert report.completed_at is not None

    def test_request_parts(self):
        self.run(["walking on the beach"])

        parts = self.client.calls[0]
        assert parts[0] is self.character
        assert parts[1] is self.background
        assert parts[2].startswith("[QUALITY] ")
        assert "[PRESET:special-wedding]" in parts[2]
        assert "aspect=16:9;" in parts[2]
        assert "Positive: walking on the beach\n" in parts[2]

    def test_failure_is_isolated(self):
        self.client.fail_on = {"second"}

        report = self.run(["first", "second", "third"])

        states = [item.state for item in report.items]
        assert states == [BatchItemState.SUCCEEDED, BatchItemState.FAILED, BatchItemState.SUCCEEDED]
        assert "No valid image" in report.items[1].error
        assert len(report.succeeded) == 2
        assert len(report.failed) == 1

    def test_progress_and_results(self):
        progress = []
        finished = []

        self.run(["a", "b", "c"], on_progress=lambda i, n: progress.append((i, n)),
                 on_result=lambda item: finished.append(item.prompt))

        assert progress == [(1, 3), (2, 3), (3, 3)]
        assert finished == ["a", "b", "c"]

    def test_cancel_after_k_items(self):
        token = CancellationToken()
        self.client.on_call = lambda n: token.cancel() if n == 2 else None

        report = self.run(["a", "b", "c", "d"], token=token)

        assert len(self.client.calls) == 2
        assert len(report.results) == 2
        assert report.cancelled is True
        assert report.items[2].state is BatchItemState.PENDING
        assert report.items[3].state is BatchItemState.PENDING

    def test_cancelled_before_start(self):
        token = CancellationToken()
        token.cancel()

        report = self.run(["a", "b"], token=token)

        assert self.client.calls == []
        assert report.results == []
        assert report.cancelled is True

    def test_translates_each_prompt(self):
        translator = FakeTranslator()
        runner = BatchRunner(self.client, translator, BatchConfig(locale="vi"))

        self.run(["đi dạo trên bãi biển"], runner=runner)

        assert translator.calls == [("đi dạo trên bãi biển", "vi", "en")]
        assert "Positive: EN(đi dạo trên bãi biển)\n" in self.client.calls[0][2]

    def test_translation_failure_is_isolated(self):
        translator = FakeTranslator(fail_on=["bad"])
        runner = BatchRunner(self.client, translator, BatchConfig(locale="vi"))

        report = self.run(["first", "bad", "third"], runner=runner)

        assert [item.state for item in report.items] == [
            BatchItemState.SUCCEEDED,
            BatchItemState.FAILED,
            BatchItemState.SUCCEEDED,
        ]
        assert report.items[1].error == "translation quota exceeded"
        assert report.items[1].result is None
        assert len(self.client.calls) == 2
        assert not any("Positive: EN(bad)" in call[2] for call in self.client.calls)
        assert not any("Positive: bad\n" in call[2] for call in self.client.calls)
        assert [text for text, _, _ in translator.calls] == ["first", "bad", "third"]

    def test_to_dict(self):
        report = self.run(["a"])
        data = report.to_dict()
        assert data["succeeded"] == 1
        assert data["items"][0]["state"] == "succeeded"


class TestSplitPrompts:
    def test_drops_blank_lines(self):
        assert split_prompts("one\n\n  \ntwo\n") == ["one", "two"]

    def test_sequence(self):
        assert split_prompts(["one", "", "two"]) == ["one", "two"]
