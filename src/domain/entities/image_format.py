from __future__ import annotations

from enum import Enum


class SupportedFormat(str, Enum):
    PNG = "png"
    JPEG = "jpg"

    @property
    def pil_format(self) -> str:
        return "PNG" if self is SupportedFormat.PNG else "JPEG"

    @property
    def content_type(self) -> str:
        return "image/png" if self is SupportedFormat.PNG else "image/jpeg"
