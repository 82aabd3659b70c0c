"""
Presets
=======

Read-only preset tables, the directive composer, and the prompt catalog
built on top of them.
"""

from .registry import (
    PresetConfig,
    DirectiveController,
    CONTROLLER,
    PRESETS,
    ASPECT_RATIOS,
    get_preset,
    list_presets,
)
from .composer import (
    DirectiveOverrides,
    compose,
    resolve_aspect,
    resolve_beauty,
    AUTO_ASPECT,
)
from .catalog import (
    TrendConfig,
    TRENDS,
    COMIC_STYLES,
    FUSION_INSTRUCTION,
    build_batch_prompt,
    build_trend_prompt,
    build_comic_prompt,
    build_text_to_image_prompt,
    locale_instruction,
    CONTROL_MODES,
    LOOKBOOK_THEMES,
    SkinStyle,
    UPSCALE_FORMULA,
    UPSCALE_STAGES,
    build_pose_prompt,
    build_prop_fusion_prompt,
    build_product_placement_prompt,
    build_design_prompt,
    build_stylist_prompt,
    build_lookbook_prompt,
    build_upscale_prompt,
)

__all__ = [
    "PresetConfig",
    "DirectiveController",
    "CONTROLLER",
    "PRESETS",
    "ASPECT_RATIOS",
    "get_preset",
    "list_presets",
    "DirectiveOverrides",
    "compose",
    "resolve_aspect",
    "resolve_beauty",
    "AUTO_ASPECT",
    "TrendConfig",
    "TRENDS",
    "COMIC_STYLES",
    "FUSION_INSTRUCTION",
    "build_batch_prompt",
    "build_trend_prompt",
    "build_comic_prompt",
    "build_text_to_image_prompt",
    "locale_instruction",
    "CONTROL_MODES",
    "LOOKBOOK_THEMES",
    "SkinStyle",
    "UPSCALE_FORMULA",
    "UPSCALE_STAGES",
    "build_pose_prompt",
    "build_prop_fusion_prompt",
    "build_product_placement_prompt",
    "build_design_prompt",
    "build_stylist_prompt",
    "build_lookbook_prompt",
    "build_upscale_prompt",
]
