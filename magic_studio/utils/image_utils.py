"""
Image Utilities
===============

Payload conversion, dimension probing and aspect-ratio normalization.
"""

import base64
import binascii
import logging
import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


ASPECT_EPSILON = 0.01

# Padded canvases larger than this on either side are refused.
MAX_CANVAS_SIDE = 16384

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
}


@dataclass(frozen=True)
class UploadedImagePayload:
    """
    A source image ready to be sent as an inline request part.

    Built once from bytes, a file or a data URI and never mutated;
    normalization returns a new payload instead.
    """

    data: str  # base64
    mime_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "UploadedImagePayload":
        return cls(data=base64.b64encode(raw).decode("utf-8"), mime_type=mime_type)

    @classmethod
    def from_path(cls, image_path: Union[str, Path]) -> "UploadedImagePayload":
        """
        Read and encode an image file.

        Args:
            image_path: Path to the image file

        Returns:
            Payload with the MIME type inferred from the extension
        """
        path = Path(image_path)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        mime_type = MIME_TYPES.get(path.suffix.lower(), "image/jpeg")
        return cls.from_bytes(path.read_bytes(), mime_type)

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "UploadedImagePayload":
        mime_type, data = parse_data_uri(data_uri)
        return cls(data=data, mime_type=mime_type)

    def to_part(self):
        """Inline image part for a generation request."""
        from ..api.base import ImagePart

        return ImagePart(data=self.raw_bytes, mime_type=self.mime_type)

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def parse_data_uri(data_uri: str) -> Tuple[str, str]:
    """
    Split a ``data:<mime>;base64,<data>`` URI.

    Returns:
        Tuple of (mime_type, base64_data)
    """
    header, sep, data = (data_uri or "").partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValidationError("Malformed data URI", field="data_uri", value=header)
    mime_type = header[len("data:"):-len(";base64")]
    if not mime_type:
        raise ValidationError("Data URI has no MIME type", field="data_uri", value=header)
    return mime_type, data


def download_filename(data_uri: Optional[str]) -> str:
    """Suggested filename for a generated image data URI."""
    if not data_uri:
        return "generated-image.png"
    try:
        mime_type, _ = parse_data_uri(data_uri)
    except ValidationError:
        return "generated-image.png"
    extension = mime_type.split("/")[-1] or "png"
    if extension == "jpeg":
        extension = "jpg"
    return f"generated-image.{extension}"


def _open(image: UploadedImagePayload) -> Image.Image:
    try:
        img = Image.open(BytesIO(image.raw_bytes))
        img.load()
        return img
    except (UnidentifiedImageError, OSError, binascii.Error) as e:
        raise ValidationError(f"Failed to load image: {e}", field="image") from e


def get_image_dimensions(image: UploadedImagePayload) -> Tuple[int, int]:
    """
    Get the pixel dimensions of an image payload.

    Returns:
        Tuple of (width, height)
    """
    with _open(image) as img:
        return img.size


def parse_aspect_ratio(ratio: str) -> Optional[float]:
    """Parse "W:H" into W/H, or None when malformed, non-finite or non-positive."""
    try:
        w_str, h_str = (ratio or "").split(":")
        w, h = float(w_str), float(h_str)
    except ValueError:
        return None
    if not (math.isfinite(w) and math.isfinite(h)):
        return None
    if not (w > 0 and h > 0):
        return None
    ratio_value = w / h
    if not (math.isfinite(ratio_value) and ratio_value > 0):
        return None
    return ratio_value


def reduced_aspect_ratio(width: int, height: int) -> str:
    """Exact "W:H" of a pixel size in lowest terms, e.g. 1920x1080 -> "16:9"."""
    if width <= 0 or height <= 0:
        raise ValidationError(f"Invalid image size {width}x{height}", field="image")
    divisor = math.gcd(width, height)
    return f"{width // divisor}:{height // divisor}"


def padded_canvas_size(width: int, height: int, target_ratio: float) -> Tuple[int, int]:
    """
    Smallest canvas with ``target_ratio`` that holds ``width`` x ``height``
    without cropping: one dimension is kept, the other grows.
    """
    source_ratio = width / height
    if source_ratio > target_ratio:
        return width, round(width / target_ratio)
    return round(height * target_ratio), height


def resize_to_aspect(
    image: UploadedImagePayload,
    target_ratio: str,
    fill: Tuple[int, int, int] = (0, 0, 0),
) -> UploadedImagePayload:
    """
    Pad an image onto a canvas with the target aspect ratio.

    The source is centered on a solid ``fill`` background and never cropped.
    A malformed ratio, a source already within ``ASPECT_EPSILON`` of the
    target, or a canvas wider or taller than ``MAX_CANVAS_SIDE`` returns
    ``image`` itself untouched.

    Args:
        image: Source payload
        target_ratio: Ratio string such as "16:9"
        fill: Background color

    Returns:
        A new payload in the source MIME type, or ``image`` unchanged
    """
    target = parse_aspect_ratio(target_ratio)
    if target is None:
        logger.warning(f"Invalid aspect ratio: {target_ratio}. Returning original image.")
        return image

    with _open(image) as img:
        width, height = img.size
        if abs(width / height - target) < ASPECT_EPSILON:
            return image

        canvas_w, canvas_h = padded_canvas_size(width, height, target)
        if max(canvas_w, canvas_h) > MAX_CANVAS_SIDE:
            logger.warning(
                f"Aspect {target_ratio} needs a {canvas_w}x{canvas_h} canvas, "
                f"over the {MAX_CANVAS_SIDE}px limit. Returning original image."
            )
            return image
        pil_format = PIL_FORMATS.get(image.mime_type, "PNG")
        mime_type = image.mime_type if image.mime_type in PIL_FORMATS else "image/png"

        keep_alpha = pil_format != "JPEG" and (
            img.mode in ("RGBA", "LA") or "transparency" in img.info
        )
        mode = "RGBA" if keep_alpha else "RGB"
        source = img.convert(mode)

        canvas = Image.new(mode, (canvas_w, canvas_h), fill + (255,) if keep_alpha else fill)
        offset = ((canvas_w - width) // 2, (canvas_h - height) // 2)
        canvas.paste(source, offset, source if keep_alpha else None)

    buffer = BytesIO()
    canvas.save(buffer, pil_format)
    logger.debug(
        f"Padded {width}x{height} to {canvas_w}x{canvas_h} for aspect {target_ratio}"
    )
    return UploadedImagePayload.from_bytes(buffer.getvalue(), mime_type)
