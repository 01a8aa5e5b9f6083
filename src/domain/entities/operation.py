from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class FlipHorizontal:
    pass


@dataclass(frozen=True)
class FlipVertical:
    pass


@dataclass(frozen=True)
class RotateLeft:
    pass


@dataclass(frozen=True)
class RotateRight:
    pass


@dataclass(frozen=True)
class Rotate:
    degrees: int  # arbitrary angle, accepted but not applied


@dataclass(frozen=True)
class ConvertToGray:
    pass


@dataclass(frozen=True)
class Resize:
    percent: int


@dataclass(frozen=True)
class Thumbnail:
    pass


Operation = Union[
    FlipHorizontal,
    FlipVertical,
    RotateLeft,
    RotateRight,
    Rotate,
    ConvertToGray,
    Resize,
    Thumbnail,
]
