"""Tests for workflow.fanout and workflow.variants."""

import asyncio

import pytest

from magic_studio.core.exceptions import GenerationBlocked, ValidationError
from magic_studio.presets import COMIC_STYLES, TRENDS
from magic_studio.workflow.fanout import fan_out
from magic_studio.workflow.variants import VariantGenerator


def delayed(value, delay, error=None):
    async def action():
        await asyncio.sleep(delay)
        if error is not None:
            raise error
        return value
    return action


# ---------------------------------------------------------------------------
# Fan-out join
# ---------------------------------------------------------------------------

class TestFanOut:
    def test_partial_failure(self):
        branches = {
            "a": delayed("A", 0.01),
            "b": delayed(None, 0.0, RuntimeError("b broke")),
            "c": delayed("C", 0.0),
            "d": delayed(None, 0.02, ValueError("d broke")),
        }

        result = asyncio.run(fan_out(branches))

        assert sorted(result.values) == ["A", "C"]
        assert result.failure_count == 2
        assert {f.key for f in result.failures} == {"b", "d"}
        assert {f.message for f in result.failures} == {"b broke", "d broke"}

    def test_completion_order(self):
        branches = {
            "slow": delayed("slow", 0.05),
            "fast": delayed("fast", 0.0),
        }

        result = asyncio.run(fan_out(branches))

        assert [key for key, _ in result.successes] == ["fast", "slow"]

    def test_branches_run_concurrently(self):
        running = []
        peak = []

        def branch(key):
            async def action():
                running.append(key)
                peak.append(len(running))
                await asyncio.sleep(0.01)
                running.remove(key)
                return key
            return action

        result = asyncio.run(fan_out({k: branch(k) for k in "abc"}))

        assert max(peak) == 3
        assert len(result.successes) == 3

    def test_all_fail(self):
        result = asyncio.run(fan_out({
            k: delayed(None, 0.0, RuntimeError(k)) for k in "xyz"
        }))

        assert result.successes == []
        assert result.failure_count == 3

    def test_empty(self):
        result = asyncio.run(fan_out({}))
        assert result.successes == [] and result.failures == []


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class PromptedImageClient:
    def __init__(self, fail_when=None):
        self.fail_when = fail_when
        self.calls = []

    async def edit_images(self, parts):
        self.calls.append(list(parts))
        await asyncio.sleep(0)
        if self.fail_when and self.fail_when in parts[-1]:
            raise GenerationBlocked("SAFETY")
        return f"data:image/png;base64,{len(self.calls)}"


class TestVariantGenerator:
    def setup_method(self):
        self.client = PromptedImageClient()
        self.generator = VariantGenerator(self.client)

    def test_trend_variants(self, subject):
        result = asyncio.run(
            self.generator.generate_trend_variants(subject, ["cyborg", "tv-show", "cyborg"])
        )

        assert sorted(key for key, _ in result.successes) == ["cyborg", "tv-show"]
        assert len(self.client.calls) == 2
        assert all(call[0] is subject and len(call) == 2 for call in self.client.calls)

    def test_partner_is_second_image(self, subject, context):
        asyncio.run(
            self.generator.generate_trend_variants(subject, ["wedding-photo"], partner=context)
        )

        parts = self.client.calls[0]
        assert parts[0] is subject and parts[1] is context
        assert "[SUBJECTS]" in parts[2]

    def test_one_trend_fails(self, subject):
        self.client.fail_when = TRENDS["cyborg"].prompt

        result = asyncio.run(
            self.generator.generate_trend_variants(subject, ["cyborg", "giant-person"])
        )

        assert [key for key, _ in result.successes] == ["giant-person"]
        assert result.failures[0].key == "cyborg"
        assert isinstance(result.failures[0].error, GenerationBlocked)

    def test_trend_validation(self, subject):
        with pytest.raises(ValidationError):
            asyncio.run(self.generator.generate_trend_variants(None, ["cyborg"]))
        with pytest.raises(ValidationError):
            asyncio.run(self.generator.generate_trend_variants(subject, []))
        with pytest.raises(ValidationError):
            asyncio.run(self.generator.generate_trend_variants(subject, ["not-a-trend"]))
        assert self.client.calls == []

    def test_comic_variants_default_to_all_styles(self, subject):
        result = asyncio.run(self.generator.generate_comic_variants(subject))

        assert sorted(key for key, _ in result.successes) == sorted(COMIC_STYLES)
        assert result.failure_count == 0

    def test_unknown_comic_style(self, subject):
        with pytest.raises(ValidationError):
            asyncio.run(self.generator.generate_comic_variants(subject, ["Pixar"]))
