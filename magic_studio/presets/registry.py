"""
Preset Registry
===============

Read-only lookup tables for photographic presets and the static directive
blocks that every composed directive carries.

The tables are built once at import time and exposed through
``types.MappingProxyType`` so no caller can mutate them.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, List


BEAUTY_VALUES = ("on", "off")


@dataclass(frozen=True)
class DirectiveController:
    """Static quality/global/instruction settings shared by every preset."""

    quality_block: str
    resolution: str
    aspect_fallback: str
    color_pipeline: str
    noise_floor: str
    generation_instruction: str


@dataclass(frozen=True)
class PresetConfig:
    """A named bundle of style, camera, lighting, mood, aspect and beauty defaults."""

    id: str
    label: str
    style: str
    camera: str
    lighting: str
    mood: str
    aspect: Optional[str] = None
    beauty: str = "off"

    def __post_init__(self):
        if self.beauty not in BEAUTY_VALUES:
            raise ValueError(f"beauty must be 'on' or 'off', got {self.beauty!r}")


CONTROLLER = DirectiveController(
    quality_block=(
        "ultra-high detail, professional grade, 8K native resolution "
        "(8192x8192 pixels), ACES-like cinematic tone mapping, maximum detail "
        "preservation, no upscaling. The final output must be extremely "
        "high-resolution."
    ),
    resolution="8192x8192",
    aspect_fallback="1:1",
    color_pipeline="ACES-cinematic",
    noise_floor="0.01",
    generation_instruction=(
        "Generate a single, rasterized image based on the user's input images "
        "and the detailed prompt. Adhere strictly to all quality, global, and "
        "preset parameters. Output only the image."
    ),
)


_PRESET_LIST: Tuple[PresetConfig, ...] = (
    PresetConfig(
        id="portrait-studio",
        label="Portrait: Studio",
        style="classic, clean, professional",
        camera="85mm f/1.4 lens, shallow depth of field, sharp focus on eyes",
        lighting="three-point setup, softbox key light, subtle rim light",
        mood="elegant, timeless, focused",
        aspect="3:4",
        beauty="on",
    ),
    PresetConfig(
        id="portrait-outdoor-sunny",
        label="Portrait: Outdoor Sunny",
        style="natural, vibrant, lifestyle",
        camera="50mm f/1.8, bokeh background, natural framing",
        lighting="golden hour sunlight, warm tones, lens flare",
        mood="happy, bright, energetic",
        aspect="3:4",
        beauty="on",
    ),
    PresetConfig(
        id="portrait-outdoor-overcast",
        label="Portrait: Outdoor Overcast",
        style="soft, diffused, moody",
        camera="85mm f/1.8, medium depth of field",
        lighting="overcast day, soft natural light, even skin tones",
        mood="calm, introspective, gentle",
        aspect="3:4",
        beauty="on",
    ),
    PresetConfig(
        id="fashion-editorial",
        label="Fashion: Editorial",
        style="high fashion, avant-garde, dynamic",
        camera="35mm or 50mm lens, full-body shots, unconventional angles",
        lighting="hard light, dramatic shadows, styled studio lighting",
        mood="confident, powerful, artistic",
        aspect="4:5",
        beauty="on",
    ),
    PresetConfig(
        id="fashion-beauty-commercial",
        label="Fashion: Beauty Commercial",
        style="clean, flawless, polished",
        camera="100mm macro lens, close-up on face, perfect skin texture",
        lighting="ring light or beauty dish, no shadows, bright and clean",
        mood="luxurious, perfect, radiant",
        aspect="1:1",
        beauty="on",
    ),
    PresetConfig(
        id="lifestyle-street",
        label="Lifestyle: Street",
        style="candid, authentic, urban",
        camera="28mm or 35mm lens, reportage style, capturing moments",
        lighting="natural city light, reflections, neon signs at night",
        mood="real, energetic, spontaneous",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="lifestyle-corporate",
        label="Lifestyle: Corporate",
        style="professional, modern, clean",
        camera="50mm lens, environmental portraits in an office setting",
        lighting="soft window light or professional strobes, clean and bright",
        mood="successful, confident, approachable",
        aspect="3:2",
        beauty="off",
    ),
    PresetConfig(
        id="fine-art-drama",
        label="Fine Art: Drama",
        style="painterly, emotional, chiaroscuro",
        camera="50mm prime lens, deliberate composition",
        lighting="single light source, deep shadows, high contrast",
        mood="intense, soulful, mysterious",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="fine-art-bw",
        label="Fine Art: Black & White",
        style="timeless, graphic, minimalist",
        camera="various lenses, focus on texture, shape, and form",
        lighting="high contrast, directional light to create shapes",
        mood="classic, emotional, profound",
        aspect="1:1",
        beauty="off",
    ),
    PresetConfig(
        id="landscape-nature",
        label="Landscape: Nature",
        style="epic, breathtaking, vibrant",
        camera="16-35mm wide-angle lens, deep depth of field, leading lines",
        lighting="sunrise or sunset, dramatic sky, atmospheric conditions",
        mood="majestic, peaceful, wild",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="landscape-cityscape",
        label="Landscape: Cityscape",
        style="dynamic, modern, futuristic",
        camera="wide-angle lens, long exposure for light trails",
        lighting="blue hour, city lights, reflections on wet streets",
        mood="vibrant, bustling, impressive",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="landscape-epic-fantasy",
        label="Landscape: Epic Fantasy",
        style="painterly, grand scale, imaginative, Lord of the Rings inspired",
        camera="ultra-wide lens, dramatic perspective, leading lines into mythical structures",
        lighting="god rays, magical glowing elements, dramatic storm clouds, sunrise/sunset",
        mood="awe-inspiring, adventurous, mythical, ancient",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="architecture-exterior",
        label="Architecture: Exterior",
        style="clean, geometric, powerful",
        camera="tilt-shift lens to correct perspective, sharp focus",
        lighting="bright daylight to create strong lines and shadows",
        mood="minimalist, grand, structured",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="architecture-interior",
        label="Architecture: Interior",
        style="warm, inviting, well-designed",
        camera="ultra-wide lens, one-point perspective, focus on details",
        lighting="ambient light, soft window light, warm artificial lights",
        mood="cozy, elegant, spacious",
        aspect="4:3",
        beauty="off",
    ),
    PresetConfig(
        id="product-commercial",
        label="Product: Commercial",
        style="sleek, desirable, high-end",
        camera="100mm macro lens, focus stacking for ultimate sharpness",
        lighting="studio lighting, gradient backgrounds, perfect reflections",
        mood="premium, clean, attractive",
        aspect="1:1",
        beauty="off",
    ),
    PresetConfig(
        id="product-food",
        label="Product: Food",
        style="delicious, fresh, appetizing",
        camera="macro lens, focus on texture, shallow depth of field",
        lighting="soft natural light, backlight to show steam or texture",
        mood="tasty, rustic, vibrant",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="product-food-dark",
        label="Product: Food (Dark & Moody)",
        style="dramatic, textured, rustic, chiaroscuro",
        camera="macro lens, tight crop, shallow depth of field",
        lighting="single directional light source from the side or back, deep shadows",
        mood="rich, artisanal, sophisticated, tempting",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="product-macro",
        label="Product: Macro",
        style="detailed, intricate, abstract",
        camera="true macro 1:1 lens, extreme close-up",
        lighting="specialized ring or twin lights to illuminate tiny details",
        mood="fascinating, scientific, beautiful",
        aspect="1:1",
        beauty="off",
    ),
    PresetConfig(
        id="special-night-street",
        label="Special: Night Street",
        style="cyberpunk, neon, cinematic",
        camera="fast prime lens (f/1.4), handheld, capturing motion",
        lighting="neon signs, streetlights, creating a colorful, moody scene",
        mood="futuristic, mysterious, alive",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="special-wedding",
        label="Special: Wedding",
        style="romantic, dreamy, emotional",
        camera="85mm f/1.4 for portraits, 35mm for moments, soft focus",
        lighting="natural light, golden hour, fairy lights",
        mood="loving, happy, timeless",
        aspect="3:2",
        beauty="on",
    ),
    PresetConfig(
        id="special-newborn",
        label="Special: Newborn",
        style="tender, pure, delicate",
        camera="50mm macro, close-up on details, very shallow DoF",
        lighting="large, soft window light, warm and gentle",
        mood="innocent, peaceful, loving",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="special-sports",
        label="Special: Sports",
        style="dynamic, powerful, action-packed",
        camera="telephoto lens (300mm+), fast shutter speed, panning",
        lighting="stadium lights or harsh daylight, creating drama",
        mood="energetic, competitive, triumphant",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="special-wildlife",
        label="Special: Wildlife",
        style="natural, majestic, candid",
        camera="long telephoto lens (600mm+), eye-level with the animal",
        lighting="early morning or late afternoon light",
        mood="wild, free, respectful",
        aspect="3:2",
        beauty="off",
    ),
    PresetConfig(
        id="special-aerial",
        label="Special: Aerial",
        style="epic, abstract, birds-eye view",
        camera="drone camera, wide-angle, top-down perspective",
        lighting="midday sun for patterns or golden hour for long shadows",
        mood="grand, expansive, unique",
        aspect="16:9",
        beauty="off",
    ),
    PresetConfig(
        id="special-conceptual",
        label="Special: Conceptual",
        style="surreal, thought-provoking, artistic",
        camera="any lens, focus on the idea, not realism",
        lighting="lighting to serve the concept, can be unnatural or symbolic",
        mood="mysterious, intellectual, imaginative",
        aspect="4:5",
        beauty="off",
    ),
    PresetConfig(
        id="special-vintage-film",
        label="Special: Vintage Film",
        style="nostalgic, grainy, faded colors, analog film emulation (like Kodachrome or Portra 400)",
        camera="50mm prime lens, classic composition, slight vignetting",
        lighting="natural, slightly underexposed, warm golden hour tones",
        mood="sentimental, timeless, authentic, cinematic",
        aspect="3:2",
        beauty="off",
    ),
    PresetConfig(
        id="art-fantasy",
        label="Art: Fantasy",
        style="magical, epic, illustrative",
        camera="cinematic angles, wide shots for environments, portraits for characters",
        lighting="glowing magical light, dramatic god rays, ethereal glow",
        mood="adventurous, mystical, enchanting",
        aspect="16:9",
        beauty="on",
    ),
    PresetConfig(
        id="art-sci-fi",
        label="Art: Sci-Fi",
        style="futuristic, technological, sleek",
        camera="anamorphic lens look, clean lines, vast cityscapes or tight ship interiors",
        lighting="holographic projections, neon highlights, cold metallic reflections",
        mood="awe-inspiring, advanced, dystopian or utopian",
        aspect="21:9",
        beauty="off",
    ),
    PresetConfig(
        id="art-cyberpunk-city",
        label="Art: Cyberpunk Cityscape",
        style="futuristic, neon-drenched, dystopian, high-tech",
        camera="wide-angle lens, low angle, dynamic composition, cinematic",
        lighting="glowing neon signs, reflections on wet pavement, volumetric fog",
        mood="gritty, mysterious, vibrant, alive",
        aspect="21:9",
        beauty="off",
    ),
    PresetConfig(
        id="art-watercolor-portrait",
        label="Art: Watercolor Portrait",
        style="soft, translucent, blended colors, expressive brushstrokes",
        camera="n/a (artistic interpretation), focus on emotion",
        lighting="diffused, high-key lighting, soft shadows, mimicking natural light on paper",
        mood="dreamy, delicate, artistic, gentle",
        aspect="3:4",
        beauty="on",
    ),
    PresetConfig(
        id="special-abstract-geometric",
        label="Art: Abstract Geometric",
        style="minimalist, clean lines, bold shapes, bauhaus inspired, non-representational",
        camera="n/a (graphic design), precision and balance",
        lighting="flat, even lighting to emphasize form and color",
        mood="modern, intellectual, orderly, sophisticated",
        aspect="1:1",
        beauty="off",
    ),
)

PRESETS: Mapping[str, PresetConfig] = MappingProxyType(
    {preset.id: preset for preset in _PRESET_LIST}
)

# Aspect ratios offered for image requests; "auto" keeps the source ratio.
ASPECT_RATIOS: Tuple[str, ...] = (
    "auto", "1:1", "3:4", "4:3", "4:5", "2:3", "3:2", "16:9", "9:16", "21:9",
)


def get_preset(preset_id: str) -> Optional[PresetConfig]:
    """Return the preset registered under ``preset_id``, or None."""
    return PRESETS.get(preset_id)


def list_presets() -> List[str]:
    """Preset ids in registration order."""
    return list(PRESETS.keys())
