"""
Security Utilities
==================

Helpers that keep credentials out of logs and user input out of file paths.
"""

import re
import logging

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str, max_length: int = 255) -> str:
    """
    Sanitize a filename to remove dangerous characters.

    Args:
        filename: Original filename
        max_length: Maximum filename length

    Returns:
        Safe filename
    """
    if not filename:
        return "unnamed"

    # Keep only the final path component
    filename = filename.replace("\\", "/").rsplit("/", 1)[-1]

    safe = re.sub(r"[^A-Za-z0-9._\-]", "_", filename)
    safe = safe.lstrip(".")

    if len(safe) > max_length:
        stem, dot, ext = safe.rpartition(".")
        if dot and len(ext) < 10:
            safe = stem[: max_length - len(ext) - 1] + "." + ext
        else:
            safe = safe[:max_length]

    return safe or "unnamed"


def redact_api_key(text: str) -> str:
    """
    Redact API keys from text before it is logged or surfaced.

    Args:
        text: Text that might contain API keys

    Returns:
        Text with API keys redacted
    """
    if not text:
        return text

    patterns = [
        # Google API keys
        (r"AIza[A-Za-z0-9_\-]{35}", "AIza***REDACTED***"),
        # key= query parameters
        (r"([?&]key=)[^&\s]+", r"\1***REDACTED***"),
        # Generic API key patterns
        (r"api[_-]?key['\"]?\s*[:=]\s*['\"]?[A-Za-z0-9_\-]+", "api_key: ***REDACTED***"),
        (r"(GEMINI_API_KEY|GOOGLE_API_KEY)=[^\s]+", r"\1=***REDACTED***"),
    ]

    result = text
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE)

    return result
