"""
Media Handles
=============

In-memory handles for downloaded media, addressable locally for playback
or saving.
"""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..core.security import sanitize_filename

logger = logging.getLogger(__name__)


EXTENSIONS = {
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class MediaHandle:
    """Downloaded media bytes plus the metadata needed to play or save them."""

    content: bytes
    mime_type: str = "video/mp4"
    source_uri: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.content).decode("utf-8")
        return f"data:{self.mime_type};base64,{encoded}"

    def default_filename(self, stem: str = "generated-video") -> str:
        return f"{stem}{EXTENSIONS.get(self.mime_type, '.bin')}"

    def save(
        self,
        directory: Union[str, Path],
        filename: Optional[str] = None,
    ) -> str:
        """
        Write the media to ``directory``.

        Args:
            directory: Target directory, created if missing
            filename: Optional filename; sanitized before use

        Returns:
            Path to the saved file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        output_path = directory / sanitize_filename(filename or self.default_filename())
        with open(output_path, "wb") as f:
            f.write(self.content)

        logger.info(f"Media saved to {output_path}")
        return str(output_path)
