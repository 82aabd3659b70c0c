"""
Utilities
=========

Image payload helpers and in-memory media handles.
"""

from .image_utils import (
    UploadedImagePayload,
    parse_data_uri,
    download_filename,
    get_image_dimensions,
    parse_aspect_ratio,
    resize_to_aspect,
)
from .media import MediaHandle

__all__ = [
    "UploadedImagePayload",
    "parse_data_uri",
    "download_filename",
    "get_image_dimensions",
    "parse_aspect_ratio",
    "resize_to_aspect",
    "MediaHandle",
]
