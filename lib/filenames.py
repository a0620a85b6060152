"""
Filename derivation for downloaded images.
"""
import re

from config import IMAGE_EXTENSIONS, DEFAULT_IMAGE_EXTENSION

# ASCII word chars, dot and hyphen are kept; everything else becomes "_"
_UNSAFE_CHAR = re.compile(r"[^\w.\-]", re.ASCII)
_KNOWN_EXTENSION = re.compile(
    r"\.(" + "|".join(IMAGE_EXTENSIONS) + r")$",
    re.IGNORECASE,
)


def sanitize_filename(s: str) -> str:
    """Replace each character outside [A-Za-z0-9_.-] with an underscore."""
    return _UNSAFE_CHAR.sub("_", s)


def extension_for_content_type(content_type: str | None) -> str:
    """
    Pick a file extension from a Content-Type header.
    png/webp/gif are recognized by substring; anything else is jpg.
    """
    ct = (content_type or "").lower()
    for ext in ("png", "webp", "gif"):
        if ext in ct:
            return ext
    return DEFAULT_IMAGE_EXTENSION


def filename_from_url(url: str, row: int, content_type: str | None = None) -> str:
    """
    Derive a filename from the last path segment of a URL.

    The query string is dropped first. An empty result falls back to
    "image_row_<row>". An extension from the content type is appended
    unless the name already ends in a known image extension.
    """
    path = url.split("?", 1)[0]
    base = sanitize_filename(path.rsplit("/", 1)[-1])
    if not base:
        base = f"image_row_{row}"
    if _KNOWN_EXTENSION.search(base):
        return base
    return f"{base}.{extension_for_content_type(content_type)}"


def filename_from_label(label: str, content_type: str | None = None) -> str | None:
    """
    Derive a filename from a name-column cell value.
    Returns None when the trimmed label is empty.
    """
    text = (label or "").strip()
    if not text:
        return None
    return f"{sanitize_filename(text)}.{extension_for_content_type(content_type)}"
