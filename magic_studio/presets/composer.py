"""
Directive Composer
==================

Builds the directive string sent with every preset-driven generation.

A directive is four sections in fixed order, separated by blank lines::

    [QUALITY] ...
    [GLOBAL] aspect=...; pipeline=...; noise_floor=....
    [PRESET:<id>] style=...; camera=...; lighting=...; mood=...; beauty=....
    [INSTRUCTION] ...

Composition is pure: identical inputs always produce byte-identical output.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import UnknownPresetError, ValidationError
from .registry import CONTROLLER, PRESETS, BEAUTY_VALUES, PresetConfig

logger = logging.getLogger(__name__)

AUTO_ASPECT = "auto"
SECTION_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class DirectiveOverrides:
    """Per-request overrides applied at composition time only."""

    aspect: Optional[str] = None
    beauty: Optional[str] = None

    def __post_init__(self):
        if self.beauty is not None and self.beauty not in BEAUTY_VALUES:
            raise ValidationError(
                f"beauty must be 'on' or 'off', got {self.beauty!r}",
                field="beauty",
                value=self.beauty,
            )


def resolve_aspect(preset: PresetConfig, overrides: Optional[DirectiveOverrides] = None) -> str:
    """Override aspect unless absent or "auto"; else the preset's; else the global fallback."""
    if overrides and overrides.aspect and overrides.aspect != AUTO_ASPECT:
        return overrides.aspect
    return preset.aspect or CONTROLLER.aspect_fallback


def resolve_beauty(preset: PresetConfig, overrides: Optional[DirectiveOverrides] = None) -> str:
    if overrides and overrides.beauty is not None:
        return overrides.beauty
    return preset.beauty


def compose(
    preset_id: str,
    overrides: Optional[DirectiveOverrides] = None,
    strict: bool = True,
) -> str:
    """
    Compose the directive for ``preset_id``.

    Args:
        preset_id: Registered preset id
        overrides: Optional aspect/beauty overrides
        strict: When False, an unknown preset yields an empty string
            instead of raising

    Returns:
        The four-section directive string

    Raises:
        UnknownPresetError: If the preset is not registered and ``strict`` is set
    """
    preset = PRESETS.get(preset_id)
    if preset is None:
        if strict:
            raise UnknownPresetError(preset_id)
        logger.warning(f"Unknown preset {preset_id!r}, composing empty directive")
        return ""

    aspect = resolve_aspect(preset, overrides)
    beauty = resolve_beauty(preset, overrides)

    quality = f"[QUALITY] {CONTROLLER.quality_block}"
    global_block = (
        f"[GLOBAL] aspect={aspect}; "
        f"pipeline={CONTROLLER.color_pipeline}; "
        f"noise_floor={CONTROLLER.noise_floor}."
    )
    preset_block = (
        f"[PRESET:{preset.id}] style={preset.style}; camera={preset.camera}; "
        f"lighting={preset.lighting}; mood={preset.mood}; beauty={beauty}."
    )
    instruction = f"[INSTRUCTION] {CONTROLLER.generation_instruction}"

    return SECTION_SEPARATOR.join([quality, global_block, preset_block, instruction])
