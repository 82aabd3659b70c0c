"""
Prompt Catalog
==============

Trend, comic-style and lookbook catalogues, the upscale formula, and the
instruction templates used by the batch, fan-out, video and single-shot tool
workflows.
"""

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .composer import compose, DirectiveOverrides


@dataclass(frozen=True)
class TrendConfig:
    """A viral trend: display label and the style instruction sent to the model."""

    label: str
    prompt: str


TRENDS: Mapping[str, TrendConfig] = MappingProxyType({
    "action-figure": TrendConfig(
        label="Action Figure",
        prompt="Recreate the subject as a collectible action figure inside its original packaging. The packaging should be branded with a cool logo and design. The figure should look like it's made of plastic, with visible joints. The style is hyper-realistic, mimicking a photograph of a real toy product on a store shelf.",
    ),
    "giant-monument": TrendConfig(
        label="Giant Monument",
        prompt="Transform the subject into a giant, majestic monument made of weathered stone or bronze. Place the monument in an epic location like a mountain top or a historic city square. The lighting should be dramatic, like at sunrise or sunset, to create long shadows and a powerful mood. The style is epic and photorealistic.",
    ),
    "giant-person": TrendConfig(
        label="Giant Person",
        prompt="Imagine the subject as a friendly giant walking through a tiny, miniature-scale city or landscape. The perspective should be from a low angle to emphasize their immense size. The overall mood is whimsical, awe-inspiring, and gentle, as if the giant is carefully exploring the small world below.",
    ),
    "billboard-ad": TrendConfig(
        label="Billboard Ad",
        prompt="Feature the subject on a massive, glowing billboard advertisement in a bustling, futuristic city at night, similar to Times Square or Neo-Tokyo. The city should be filled with neon lights, flying vehicles, and dense architecture. The ad on the billboard should look sleek and professional, as if for a major brand.",
    ),
    "magazine-cover": TrendConfig(
        label="Magazine Cover",
        prompt="Create a high-fashion magazine cover featuring the subject as the star. The cover should have a bold magazine title (e.g., \"VOGUE\", \"GQ\", \"STYLE\"), eye-catching headlines, and a barcode. The subject's photo should be styled professionally with studio lighting and a powerful pose. The mood is chic, modern, and glamorous.",
    ),
    "tv-show": TrendConfig(
        label="TV Show",
        prompt="Place the subject as a celebrity guest on a late-night talk show set. The scene should show them being interviewed, with studio lights, multiple cameras, a host's desk, and a blurred audience in the background. The subject could also be displayed on the large screens on the set. The mood is lively, professional, and exciting.",
    ),
    "advertising-sign": TrendConfig(
        label="Advertising Sign",
        prompt="Integrate the subject into a glowing, modern advertising light box on a city street or inside a subway station. The sign should be sleek and minimalist. The environment should be clean and contemporary, with reflections on wet pavement or polished floors. The mood is sophisticated and urban.",
    ),
    "cyborg": TrendConfig(
        label="Cyborg",
        prompt="Transform the subject into a futuristic cyborg. Seamlessly blend their human features with intricate robotic parts, glowing wires, and metallic textures. The style should be inspired by cyberpunk art, with dramatic lighting, a dark and moody atmosphere, and a high level of detail in the mechanical components.",
    ),
    "wedding-photo": TrendConfig(
        label="Wedding Photo",
        prompt="Recreate the subjects in a beautiful, romantic wedding photo. They should be dressed in elegant wedding attire (a stunning white gown for the bride, a sharp suit for the groom). The setting should be a picturesque location, like a beach at sunset, a lush garden, or a classic chapel. The mood is romantic, elegant, and timeless. The style should be professional wedding photography.",
    ),
    "travel-adventure": TrendConfig(
        label="Travel Adventure",
        prompt="Place the subjects on an epic travel adventure. They could be standing on a mountain peak with a breathtaking view, exploring an ancient ruin, or relaxing on a tropical beach. The image should look like a stunning travel influencer photo, with vibrant colors, beautiful lighting, and a sense of wonder and exploration. The mood is adventurous, happy, and awe-inspiring.",
    ),
})

COMIC_STYLES: Mapping[str, str] = MappingProxyType({
    "Marvel": (
        "A dynamic, high-contrast comic book style reminiscent of modern Marvel "
        "comics. Use bold inks, dramatic lighting, and a cinematic feel."
    ),
    "Anime": (
        "A vibrant, clean 90s anime style. Use bright colors, cel shading, "
        "distinct line art, and expressive, large eyes."
    ),
    "Disney": (
        "A soft, friendly, and painterly style similar to modern Disney animated "
        "films. Use smooth gradients, warm lighting, and a gentle, storybook quality."
    ),
    "Manga": (
        "A classic black and white manga style. Use screentones for shading, "
        "dynamic paneling effects, and expressive ink work. Focus on dramatic "
        "lines and emotional depth."
    ),
})

VIETNAMESE_TEXT_INSTRUCTION = """[VIETNAMESE TEXT RENDERING INSTRUCTION]
If the prompt requires rendering Vietnamese text within the image, you MUST adhere to the following rules to ensure correctness:
1.  **Use correct Unicode:** Render all Vietnamese text using precomposed Unicode characters (NFC). For example, render "ấ" directly, not as "a" + "^" + "´".
2.  **Correct Diacritics:** Ensure all diacritics (sắc, huyền, hỏi, ngã, nặng) are correctly placed on the main vowel of a syllable.
3.  **Accurate Spelling:** Use correct modern Vietnamese spelling. Pay close attention to common words like "đẹp", "tuyệt vời", "cảm ơn".
4.  **No Character Corruption:** Avoid rendering corrupted or incorrect characters from legacy encodings (like VNI or TCVN3). The final text must be clean, modern, and perfectly legible Vietnamese.
The final output must display Vietnamese text with perfect, accurate diacritics."""

FUSION_INSTRUCTION = (
    "Take the character from the first image and place them realistically into "
    "the second image (the background/context). The final composed image should "
    "be a single, coherent scene."
)

IDENTITY_PRESERVATION = """[IDENTITY PRESERVATION]
**CRITICAL INSTRUCTION: ABSOLUTE LIKENESS REQUIRED**
You MUST strictly preserve the facial features, structure, and identity of the subject(s) from the input image(s). The person in the output MUST be perfectly and instantly recognizable as the same person from the input.

**RULES:**
1.  **Direct Likeness:** Do NOT create a new person or a "similar-looking" person. The output face must be a direct, photographic likeness of the input face.
2.  **No Facial Alterations:** Do NOT alter their fundamental facial structure, including the shape of the eyes, nose, mouth, and jawline.
3.  **Preserve Details:** Maintain the original eye color, hair color, and skin tone."""

BATCH_NEGATIVE_PROMPT = "blurry, deformed, bad anatomy, ugly"


def locale_instruction(locale: str) -> str:
    """Extra text-rendering rules for locales whose script the model tends to garble."""
    return VIETNAMESE_TEXT_INSTRUCTION if locale == "vi" else ""


def _join_blocks(*blocks: str) -> str:
    return "\n\n".join(block for block in blocks if block)


def build_batch_prompt(
    prompt: str,
    preset_id: str,
    aspect_ratio: str,
) -> str:
    """
    Directive for one batch item: character from the first image, scene from
    the second, guided by the (already translated) prompt.
    """
    directive = compose(preset_id, DirectiveOverrides(aspect=aspect_ratio))
    user_prompt = "\n".join([
        "[USER_PROMPT]",
        "instruction: Combine the character(s) from the first image with the "
        "scene from the second image, guided by the text prompt. Create a "
        "coherent, realistic, and high-quality photograph.",
        f"Positive: {prompt}",
        f"Negative: {BATCH_NEGATIVE_PROMPT}",
        "Output-Format: jpeg",
    ])
    return _join_blocks(directive, user_prompt)


def build_trend_prompt(
    trend_key: str,
    aspect_ratio: str,
    has_partner: bool = False,
    locale: str = "en",
    negative_prompt: str = "",
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    """Identity-preserving prompt that restyles the subject(s) as ``trend_key``."""
    trend = TRENDS[trend_key]

    if has_partner:
        subject_instruction = (
            "[SUBJECTS] The main subject is from the first image. The second "
            "subject is from the second image. Combine them naturally into the "
            "scene as a couple or partners in the trend."
        )
    else:
        subject_instruction = "[SUBJECT] The subject is the person in the provided image."

    avoid = [
        "**NEGATIVE PROMPT (Things to AVOID):**",
        "-   Changing the subject's face.",
        "-   Generating a different person.",
        "-   Inconsistent facial features.",
        "-   Altering the DNA of the character.",
    ]
    if negative_prompt:
        avoid.append(f"- {negative_prompt}")

    return _join_blocks(
        "[TASK] Create a viral trend image.",
        locale_instruction(locale),
        IDENTITY_PRESERVATION,
        "\n".join(avoid),
        "\n".join([
            f"[STYLE INSTRUCTION] {trend.prompt}",
            subject_instruction,
            f"[ASPECT RATIO] The final image MUST have an aspect ratio of {aspect_ratio}.",
        ]),
        "\n".join([
            "[USER HINTS]",
            f"Name/Title: {name or 'Not provided'}",
            f"Description: {description or 'Not provided'}",
        ]),
        "[OUTPUT] Generate a single, high-quality image adhering to all "
        "instructions, especially the critical identity preservation rules.",
    )


def build_comic_prompt(style_name: str) -> str:
    """Prompt that re-renders the photo in one of ``COMIC_STYLES``."""
    style_prompt = COMIC_STYLES[style_name]
    return _join_blocks(
        "[TASK] Transform the user's photo into a comic book art style.",
        "[IDENTITY PRESERVATION]\n"
        "**CRITICAL INSTRUCTION: ABSOLUTE LIKENESS REQUIRED**\n"
        "You MUST strictly preserve the core facial features and identity of the "
        "person in the photo. The character in the output must be perfectly "
        "recognizable as the same person, just rendered in the new art style. "
        "Do NOT create a different person.",
        "\n".join([
            "[STYLE INSTRUCTION]",
            f"Render the image in the following style: **{style_name}**.",
            f"- **Details:** {style_prompt}",
            "- The final image should be a high-quality, artistic illustration.",
        ]),
        "[OUTPUT] Generate a single image based on these instructions.",
    )


def build_text_to_image_prompt(
    prompt: str,
    preset_id: str,
    beauty: Optional[str] = None,
    locale: str = "en",
) -> str:
    """Preset directive plus user prompt for the text-to-image path."""
    directive = compose(preset_id, DirectiveOverrides(aspect="auto", beauty=beauty))
    return _join_blocks(
        directive,
        locale_instruction(locale),
        f"[USER_PROMPT]\nPositive: {prompt}",
    )


# -----------------------------------------------------------------------------
# Single-shot tools
# -----------------------------------------------------------------------------

CONTROL_MODES = ("Pose", "Edge", "Depth", "Creative")


def _output_suffix(output_format: str) -> str:
    return output_format.split("/")[-1]


def _preset_tool_prompt(
    preset_id: str,
    overrides: DirectiveOverrides,
    *lines: str,
) -> str:
    """Preset directive followed by a ``[USER_PROMPT]`` block of ``lines``."""
    directive = compose(preset_id, overrides)
    return _join_blocks(directive, "\n".join(("[USER_PROMPT]",) + lines))


def build_pose_prompt(
    preset_id: str,
    positive: str = "",
    negative: str = "",
    control_mode: str = "Pose",
    aspect_ratio: Optional[str] = "auto",
    beauty: Optional[str] = None,
    output_format: str = "image/jpeg",
) -> str:
    """Character from the first image, guided by the pose/structure reference in the second."""
    return _preset_tool_prompt(
        preset_id,
        DirectiveOverrides(aspect=aspect_ratio, beauty=beauty),
        f"Positive: {positive}",
        f"Negative: {negative}",
        f"Control Mode: {control_mode}",
        f"Output-Format: {_output_suffix(output_format)}",
    )


def build_prop_fusion_prompt(
    preset_id: str,
    positive: str = "",
    negative: str = "",
    aspect_ratio: Optional[str] = "auto",
    beauty: Optional[str] = None,
    output_format: str = "image/jpeg",
) -> str:
    return _preset_tool_prompt(
        preset_id,
        DirectiveOverrides(aspect=aspect_ratio, beauty=beauty),
        "instruction: Seamlessly and realistically integrate the object from the "
        "second image (prop) into the first image (character/scene). Match the "
        "lighting, shadows, and perspective.",
        f"Positive: {positive}",
        f"Negative: {negative}",
        f"Output-Format: {_output_suffix(output_format)}",
    )


def build_product_placement_prompt(
    preset_id: str,
    positive: str = "",
    negative: str = "",
    aspect_ratio: Optional[str] = "auto",
    output_format: str = "image/jpeg",
) -> str:
    """Product placement keeps the preset's own beauty setting."""
    return _preset_tool_prompt(
        preset_id,
        DirectiveOverrides(aspect=aspect_ratio),
        "instruction: This is a product placement task. Your goal is to seamlessly "
        "and realistically place the object from the second image (the product) "
        "into the first image (the scene). You MUST match the scene's lighting, "
        "shadows, perspective, and scale perfectly. The product should look like "
        "it naturally belongs in the environment.",
        f"Positive: {positive}",
        f"Negative: {negative}",
        f"Output-Format: {_output_suffix(output_format)}",
    )


def build_design_prompt(
    preset_id: str,
    positive: str = "",
    negative: str = "",
    aspect_ratio: Optional[str] = "auto",
    beauty: Optional[str] = None,
    output_format: str = "image/jpeg",
) -> str:
    return _preset_tool_prompt(
        preset_id,
        DirectiveOverrides(aspect=aspect_ratio, beauty=beauty),
        "instruction: Place the subject from the first image into the background "
        "of the second image. The final image should be a cohesive and "
        "high-quality artistic composition that blends the subject and background "
        "seamlessly according to the preset style.",
        f"Positive: {positive}",
        f"Negative: {negative}",
        f"Output-Format: {_output_suffix(output_format)}",
    )


DEFAULT_STYLIST_SCENE = "A clean, minimalist studio background."


def build_stylist_prompt(
    aspect_ratio: str,
    scene_description: str = "",
    positive: str = "",
    negative: str = "",
) -> str:
    """
    Virtual try-on: dress the first image's subject with every following
    accessory image and place them in the described scene.
    """
    return _join_blocks(
        "[TASK] This is an advanced virtual try-on and scene composition task. "
        "Your goal is to dress the main subject with the provided accessories and "
        "place them in the described scene.",
        "\n".join([
            "[IDENTITY PRESERVATION]",
            "**CRITICAL INSTRUCTION: ABSOLUTE LIKENESS REQUIRED**",
            "You MUST strictly preserve the facial features, structure, and identity "
            "of the subject from the first input image. The person in the output "
            "MUST be perfectly and instantly recognizable as the same person.",
            "- DO NOT change their face.",
            "- DO NOT generate a different person.",
            "- PRESERVE original pose, body shape, hair, and skin tone.",
        ]),
        "\n".join([
            "[INPUTS]",
            "- The **first image** is the [MAIN SUBJECT].",
            "- All **subsequent images** are [ACCESSORIES] (clothing, jewelry, items, etc.).",
        ]),
        "\n".join([
            "[INSTRUCTIONS]",
            "1.  **Dress the Subject:** Realistically place all [ACCESSORIES] onto "
            "the [MAIN SUBJECT]. The clothes should fit naturally, with correct "
            "draping, shadows, and lighting.",
            "2.  **Compose the Scene:** Place the fully dressed subject into the "
            "environment described in [SCENE DESCRIPTION]. If no scene is described, "
            "create a simple, neutral studio background that complements the outfit.",
            "3.  **Maintain Consistency:** The final image's lighting, photographic "
            "style, and quality should be cohesive and hyper-realistic. The aspect "
            f"ratio must be {aspect_ratio}.",
        ]),
        f"[SCENE DESCRIPTION]\n{scene_description or DEFAULT_STYLIST_SCENE}",
        "\n".join([
            "[USER HINTS]",
            f"- Positive: {positive}",
            f"- Negative (AVOID): {negative}",
        ]),
        "[OUTPUT] Generate a single, high-quality image adhering to all instructions.",
    )


# -----------------------------------------------------------------------------
# Lookbook
# -----------------------------------------------------------------------------

LOOKBOOK_THEMES: Mapping[str, TrendConfig] = MappingProxyType({
    "wedding": TrendConfig(
        label="Wedding",
        prompt="The theme is a romantic wedding lookbook. The design should be elegant, soft, and timeless. Use light colors and delicate typography placeholders.",
    ),
    "yearbook": TrendConfig(
        label="Yearbook",
        prompt="The theme is a graduation yearbook or memory book. The design should be fun, dynamic, and youthful. It can include collage-style layouts and playful graphic elements.",
    ),
    "travel": TrendConfig(
        label="Travel",
        prompt="The theme is a travel adventure log. The design should be exciting and cinematic. Use bold typography and layouts that convey a sense of journey and exploration.",
    ),
    "timeline": TrendConfig(
        label="Timeline",
        prompt="The theme is a personal timeline, showing a progression of time. The design should be sentimental and narrative-driven. Arrange photos to suggest a story from past to present.",
    ),
})

LOOKBOOK_ORIENTATIONS = ("portrait", "landscape")
LOOKBOOK_MAX_PAGES = 10
LOOKBOOK_NEGATIVE_PROMPT = (
    "blurry, distorted, malformed faces, different person, changing subject DNA"
)


def build_lookbook_prompt(
    page_number: int,
    page_count: int,
    theme: str = "wedding",
    orientation: str = "portrait",
    page_content: str = "",
    positive: str = "",
    negative: str = "",
    locale: str = "en",
) -> str:
    """
    Prompt for page ``page_number`` (1-based) of a lookbook.

    With ``page_content`` the model must lay out that exact text, read as
    ``TITLE // BODY``. Without it the page uses lorem ipsum placeholders.
    """
    if page_content:
        text_instruction = (
            "**Text Integration:** You MUST use the exact text provided in the "
            "'[PAGE CONTENT]' section for this page's headlines and body copy. "
            "Arrange and style this text beautifully within the layout. The common "
            "format is 'TITLE // BODY'. Use the text before '//' as a prominent "
            "headline. Do NOT use 'lorem ipsum' filler text."
        )
    else:
        text_instruction = (
            "**Placeholder Text:** Include placeholder text (like 'lorem ipsum') for "
            "headlines and body copy. DO NOT generate real, meaningful text. The "
            "text should simply act as a design element."
        )

    avoid = [
        "[NEGATIVE PROMPT (Things to AVOID)]",
        "- Changing the subject's face or identity.",
        "- Generating a different person.",
        "- Inconsistent facial features.",
        "- Altering the DNA of the character.",
        "- Ugly, poorly designed, cluttered layout.",
        "- Using 'lorem ipsum' if real text is provided in [PAGE CONTENT].",
        "- Generating real content if no text is provided (use lorem ipsum instead).",
    ]
    if negative:
        avoid.append(f"- {negative}")

    return _join_blocks(
        "[TASK] Your task is to design a single, elegant lookbook page. "
        f"This is page {page_number} of {page_count}.",
        locale_instruction(locale),
        "\n".join([
            "[IDENTITY PRESERVATION]",
            "**CRITICAL INSTRUCTION: ABSOLUTE LIKENESS REQUIRED**",
            "You MUST strictly preserve the facial features, structure, and identity "
            "of the subject(s) from ALL the provided input images. The people in the "
            "output MUST be perfectly and instantly recognizable as the same people.",
            "",
            "**RULES:**",
            "1.  **Direct Likeness:** Do NOT create a new person. The output face must "
            "be a direct, photographic likeness of the input faces.",
            "2.  **No Facial Alterations:** Do NOT alter their fundamental facial "
            "structure, eye color, hair color, or skin tone.",
        ]),
        "\n".join([
            "[DESIGN INSTRUCTIONS]",
            "1.  **Layout:** Create a clean, minimalist, and professional layout "
            "inspired by high-end fashion or wedding magazines. Use a balanced "
            "composition with ample white space.",
            "2.  **Photo Arrangement:** Artistically arrange one or more of the "
            "provided photos on the page. You can crop, resize, and position them "
            "creatively to create a dynamic composition.",
            f"3.  {text_instruction}",
            "4.  **Aesthetics:** The overall color palette and mood should be "
            "harmonious and sophisticated, complementing the photos.",
        ]),
        "\n".join([
            f"[THEME] {LOOKBOOK_THEMES[theme].prompt}",
            f"[PAGE ORIENTATION] The final page MUST have a {orientation} orientation. "
            "For portrait, use an aspect ratio like 3:4. For landscape, use 4:3.",
        ]),
        f"[PAGE CONTENT] {page_content}" if page_content else "",
        f"[USER HINTS]\nPositive Details: {positive or 'None'}",
        "\n".join(avoid),
    )


# -----------------------------------------------------------------------------
# Upscale
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SkinStyle:
    """Named skin rendering applied to human subjects while upscaling."""

    name: str
    skin_render: str


@dataclass(frozen=True)
class UpscalePipeline:
    explain: str
    rules: Tuple[str, ...]
    render_block: Mapping[str, str]


@dataclass(frozen=True)
class UpscaleFormula:
    skin_library: Mapping[str, SkinStyle]
    upscale_pipeline: UpscalePipeline


_MULTI_STAGE_EXPLAIN = (
    "Enable multi-stage super-resolution pipeline with face-preserve. First "
    "upscale 2x for detail recovery, then cascade 4x for texture fidelity, and "
    "finalize at 8x for ultra-sharp output."
)

UPSCALE_FORMULA = UpscaleFormula(
    skin_library=MappingProxyType({
        "Beauty_Smooth": SkinStyle(
            name="Beauty Smooth – Flawless Commercial",
            skin_render="Her skin is smooth and radiant, with flawless texture. Any blemishes, scars or pores are invisible under beauty light and gentle cinematic grading. The surface reflects soft light evenly, with glass-skin shine and creamy finish.",
        ),
        "High_Fidelity_Realism": SkinStyle(
            name="High-Fidelity Realism – Cinematic Natural Detail",
            skin_render="Her skin has ultra-high fidelity cinematic rendering with soft light diffusion. Subtle peach fuzz and delicate micro-textures are preserved under close-up focus, giving natural realism without visible blemishes. Surface reflectivity is balanced: soft glow with gentle sheen on highlights, avoiding over-plastic shine. Tonal gradients transition smoothly, showing lifelike depth and softness, maintaining a natural creamy radiance.",
        ),
        "Hybrid_Luxury": SkinStyle(
            name="Hybrid Luxury – Glossy but Natural",
            skin_render="Her skin is luminous and radiant with luxury cinematic grading, combining flawless smoothness with subtle micro-textures. Under soft diffusion light, fine peach fuzz is preserved, adding realism without imperfections. The surface reflects a creamy glow with balanced highlights, avoiding plastic shine. This rendering merges glossy commercial beauty aesthetics with the authenticity of high-fidelity cinematic portraiture.",
        ),
    }),
    upscale_pipeline=UpscalePipeline(
        explain=_MULTI_STAGE_EXPLAIN,
        rules=(
            "Stage 1: Upscale 2x – recover soft details (skin gradients, hair flow, light diffusion).",
            "Stage 2: Upscale 4x – enhance micro textures (peach fuzz, fabric weave, jewelry shine).",
            "Stage 3: Upscale 8x – finalize ultra-sharp 8K output while preserving cinematic tone.",
            "Always enable face-preserve to avoid distortion of characters.",
            "Do not separate audio layer when upscaling for video projects.",
        ),
        render_block=MappingProxyType({
            "resolution": "8K",
            "frame_rate": "24fps",
            "upscale": _MULTI_STAGE_EXPLAIN + " Preserve micro details such as peach "
            "fuzz and fabric texture. Do not separate audio layer when upscaling.",
        }),
    ),
)

DEFAULT_SKIN_STYLE = "High_Fidelity_Realism"

# (stage, scale, purpose) per requested level; the last stage finalizes.
UPSCALE_STAGES: Mapping[str, Tuple[Tuple[int, str, str], ...]] = MappingProxyType({
    "2x": (
        (1, "2x", "Upscale 2x. Recover soft details and gradients. Finalize sharp output."),
    ),
    "4x": (
        (1, "2x", "Recover soft details and gradients."),
        (2, "4x", "Enhance micro-textures (peach fuzz, fabric, etc.). Finalize sharp output."),
    ),
    "8x": (
        (1, "2x", "Recover soft details and gradients."),
        (2, "4x", "Enhance micro-textures (peach fuzz, fabric, etc.)."),
        (3, "8x", "Finalize ultra-sharp 8K-quality output."),
    ),
})


def upscale_multiplier(level: str) -> int:
    return int(level.rstrip("x"))


def build_upscale_prompt(
    width: int,
    height: int,
    level: str = "4x",
    skin_style: str = DEFAULT_SKIN_STYLE,
    positive: str = "",
    negative: str = "",
) -> str:
    """
    Multi-stage super-resolution prompt for a ``width`` x ``height`` source.

    The pipeline is embedded as JSON with an exact ``target_resolution`` of
    the source size times the level multiplier.
    """
    multiplier = upscale_multiplier(level)
    pipeline = {
        "pipeline_name": "MultiStageSuperResolution",
        "preserve_face": True,
        "avoid_plastic_skin": True,
        "target_resolution": f"{width * multiplier}x{height * multiplier}px",
        "cinematic_tone": True,
        "steps": [
            {"stage": stage, "scale": scale, "purpose": purpose}
            for stage, scale, purpose in UPSCALE_STAGES[level]
        ],
    }
    skin_render = UPSCALE_FORMULA.skin_library[skin_style].skin_render

    return "\n".join([
        "You are a professional image processing AI. Your task is to perform a "
        "high-quality, multi-stage super-resolution upscale on the provided image.",
        "",
        "**CRITICAL INSTRUCTION: FOLLOW THE PIPELINE**",
        "You MUST follow the exact upscaling pipeline defined in the JSON "
        "configuration below. The most important rule is to produce an output "
        "image with the exact 'target_resolution'.",
        "",
        "**JSON UPSCALE CONFIGURATION:**",
        "```json",
        json.dumps(pipeline, indent=2),
        "```",
        "",
        "**ADDITIONAL INSTRUCTIONS:**",
        "1.  **GENERATE NEW DETAIL:** As you upscale, intelligently generate new, "
        "photorealistic details. The result must be sharp, clear, and "
        "high-fidelity. Do not just resize and blur.",
        "2.  **PRESERVE IDENTITY:** Perfectly maintain the subject's facial "
        "features and identity. The person in the output must be instantly "
        "recognizable.",
        "3.  **PRESERVE COMPOSITION:** Do not change the original composition, "
        "colors, or lighting.",
        f'4.  **SKIN RENDERING:** For human subjects, render skin with the following style: "{skin_render}".',
        "",
        "**USER PROMPTS:**",
        f"- Positive: {positive or 'None'}",
        "- Negative (things to avoid): Returning an image with the original "
        "dimensions. Blurry results. Changes to subject's identity. "
        f"{negative}".rstrip(),
        "",
        "Execute the pipeline and return only the final, upscaled image.",
    ])
