"""
Extension and MIME type resolution.

The stored filename keeps an extension so objects stay recognizable in the
bucket. Extensions are resolved by walking an ordered tuple of strategies;
each strategy is total (returns "" when it has no answer) and the first
non-empty answer wins.
"""
import re
from typing import Callable, Optional, Sequence

DEFAULT_MIME_TYPE = "application/octet-stream"

# Mapping of image content types to file extensions
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

# Best-effort preview content types, checked in order
FILENAME_MIME_TYPES = (
    (".pdf", "application/pdf"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".gif", "image/gif"),
    (".webp", "image/webp"),
    (".txt", "text/plain"),
    (".md", "text/markdown"),
)

_NAME_EXTENSION = re.compile(r"\.([^.]+)$")

ExtensionStrategy = Callable[[str, Optional[str]], str]


def extension_from_name(name: str, content_type: Optional[str] = None) -> str:
    """Lowercased extension of ``name`` including the dot, or ""."""
    match = _NAME_EXTENSION.search(name or "")
    if not match:
        return ""
    return f".{match.group(1).lower()}"


def extension_from_mime(name: str, content_type: Optional[str] = None) -> str:
    """Extension for a known image content type, or ""."""
    return MIME_EXTENSIONS.get((content_type or "").lower(), "")


IMAGE_EXTENSION_STRATEGIES: tuple[ExtensionStrategy, ...] = (
    extension_from_name,
    extension_from_mime,
)

FILE_EXTENSION_STRATEGIES: tuple[ExtensionStrategy, ...] = (
    extension_from_name,
)


def resolve_extension(
    name: str,
    content_type: Optional[str],
    strategies: Sequence[ExtensionStrategy]
) -> str:
    for strategy in strategies:
        ext = strategy(name, content_type)
        if ext:
            return ext
    return ""


def guess_mime_from_filename(name: str) -> str:
    """
    Guess a content type from a filename extension.

    Used for preview responses when no content type was recorded.
    Never raises; unknown extensions map to application/octet-stream.
    """
    lower = (name or "").lower()
    for suffix, mime in FILENAME_MIME_TYPES:
        if lower.endswith(suffix):
            return mime
    return DEFAULT_MIME_TYPE
