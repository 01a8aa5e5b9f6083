from __future__ import annotations

from src.domain.entities.image_format import SupportedFormat
from src.domain.errors import MissingExtension, UnsupportedFormat

# Extensions are matched literally: no case folding and no "jpeg" alias.
FORMATS_BY_EXTENSION: dict[str, SupportedFormat] = {
    "png": SupportedFormat.PNG,
    "jpg": SupportedFormat.JPEG,
}


def resolve(file_name: str | None) -> SupportedFormat:
    """Pick the codec for an upload from the extension of its file name."""
    if not file_name or "." not in file_name:
        raise MissingExtension()
    ext = file_name.rsplit(".", 1)[1]
    try:
        return FORMATS_BY_EXTENSION[ext]
    except KeyError:
        raise UnsupportedFormat(ext) from None
