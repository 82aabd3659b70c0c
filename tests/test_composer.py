"""Tests for presets.composer and the preset registry."""

import pytest

from magic_studio.core.exceptions import UnknownPresetError, ValidationError
from magic_studio.presets import (
    CONTROLLER,
    PRESETS,
    PresetConfig,
    DirectiveOverrides,
    compose,
    list_presets,
    resolve_aspect,
)


def sections(directive):
    return directive.split("\n\n")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_thirty_one_presets(self):
        assert len(PRESETS) == 31
        assert list_presets()[0] == "portrait-studio"

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PRESETS["new"] = PRESETS["portrait-studio"]

    def test_presets_are_frozen(self):
        with pytest.raises(AttributeError):
            PRESETS["portrait-studio"].aspect = "1:1"

    def test_invalid_beauty_rejected(self):
        with pytest.raises(ValueError):
            PresetConfig(id="x", label="X", style="s", camera="c", lighting="l", mood="m", beauty="maybe")


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

class TestCompose:
    def test_section_order(self):
        parts = sections(compose("portrait-studio"))
        assert len(parts) == 4
        assert parts[0].startswith("[QUALITY] ")
        assert parts[1].startswith("[GLOBAL] ")
        assert parts[2].startswith("[PRESET:portrait-studio] ")
        assert parts[3].startswith("[INSTRUCTION] ")

    def test_preset_defaults(self):
        parts = sections(compose("portrait-studio"))
        assert "aspect=3:4;" in parts[1]
        assert parts[2].endswith("beauty=on.")

    def test_global_block_fields(self):
        global_block = sections(compose("lifestyle-street"))[1]
        assert global_block == (
            f"[GLOBAL] aspect=16:9; pipeline={CONTROLLER.color_pipeline}; "
            f"noise_floor={CONTROLLER.noise_floor}."
        )

    def test_preset_block_fields(self):
        preset = PRESETS["product-macro"]
        block = sections(compose("product-macro"))[2]
        assert f"style={preset.style};" in block
        assert f"camera={preset.camera};" in block
        assert f"lighting={preset.lighting};" in block
        assert f"mood={preset.mood};" in block

    def test_aspect_override(self):
        directive = compose("portrait-studio", DirectiveOverrides(aspect="16:9"))
        assert "aspect=16:9;" in sections(directive)[1]

    def test_auto_aspect_keeps_preset(self):
        directive = compose("portrait-studio", DirectiveOverrides(aspect="auto"))
        assert "aspect=3:4;" in sections(directive)[1]

    def test_beauty_override(self):
        directive = compose("portrait-studio", DirectiveOverrides(beauty="off"))
        assert sections(directive)[2].endswith("beauty=off.")

    def test_override_does_not_touch_registry(self):
        compose("portrait-studio", DirectiveOverrides(aspect="21:9", beauty="off"))
        assert PRESETS["portrait-studio"].aspect == "3:4"
        assert PRESETS["portrait-studio"].beauty == "on"

    def test_composition_is_pure(self):
        overrides = DirectiveOverrides(aspect="4:5", beauty="off")
        assert compose("fine-art-bw", overrides) == compose("fine-art-bw", overrides)

    def test_unknown_preset_raises(self):
        with pytest.raises(UnknownPresetError) as exc_info:
            compose("does-not-exist")
        assert exc_info.value.preset_id == "does-not-exist"

    def test_unknown_preset_lenient(self):
        assert compose("does-not-exist", strict=False) == ""

    def test_invalid_beauty_override(self):
        with pytest.raises(ValidationError):
            DirectiveOverrides(beauty="sometimes")


class TestResolveAspect:
    def setup_method(self):
        self.preset = PresetConfig(
            id="bare", label="Bare", style="s", camera="c", lighting="l", mood="m"
        )

    def test_fallback_without_preset_aspect(self):
        assert resolve_aspect(self.preset) == "1:1"

    def test_fallback_with_auto_override(self):
        assert resolve_aspect(self.preset, DirectiveOverrides(aspect="auto")) == "1:1"

    def test_override_wins(self):
        assert resolve_aspect(self.preset, DirectiveOverrides(aspect="9:16")) == "9:16"
