from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from src.domain.entities.image_format import SupportedFormat
from src.domain.errors import DecodeError, EncodeError, OversizedImage

THUMBNAIL_SIZE = (100, 100)

_ARRAY_MODES = ("L", "LA", "RGB", "RGBA")


class ProcessingService:
    """Pixel primitives over uint8 NumPy arrays.

    Channel convention:
    - Grayscale: (H, W)
    - Grayscale + alpha: (H, W, 2)
    - RGB: (H, W, 3)
    - RGBA: (H, W, 4)

    Every primitive returns a new array and leaves its input untouched.
    """

    # --------- codec ---------
    @staticmethod
    def decode(data: bytes, fmt: SupportedFormat) -> np.ndarray:
        try:
            img = Image.open(BytesIO(data), formats=[fmt.pil_format])
            img.load()
        except Image.DecompressionBombError as exc:
            raise OversizedImage(str(exc)) from exc
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise DecodeError(
                f"The file is not a valid {fmt.pil_format} image: {exc}"
            ) from exc
        return ProcessingService._to_array(img)

    @staticmethod
    def encode(matrix: np.ndarray, fmt: SupportedFormat, quality: int = 95) -> bytes:
        img = ProcessingService._to_pil(matrix)
        # JPEG has no alpha channel
        if fmt is SupportedFormat.JPEG and img.mode in ("LA", "RGBA"):
            img = img.convert("L" if img.mode == "LA" else "RGB")
        buf = BytesIO()
        try:
            if fmt is SupportedFormat.JPEG:
                img.save(buf, format=fmt.pil_format, quality=quality)
            else:
                img.save(buf, format=fmt.pil_format)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Encoding to {fmt.pil_format} failed: {exc}") from exc
        return buf.getvalue()

    # --------- geometry ---------
    # Mirror left-right: column x -> W - 1 - x
    @staticmethod
    def flip_horizontal(matrix: np.ndarray) -> np.ndarray:
        return np.ascontiguousarray(matrix[:, ::-1])

    # Mirror top-bottom: row y -> H - 1 - y
    @staticmethod
    def flip_vertical(matrix: np.ndarray) -> np.ndarray:
        return np.ascontiguousarray(matrix[::-1, :])

    # 90 degrees clockwise. Output shape is (W, H).
    @staticmethod
    def rotate90(matrix: np.ndarray) -> np.ndarray:
        return np.ascontiguousarray(np.rot90(matrix, k=-1, axes=(0, 1)))

    # 270 degrees clockwise (90 counter-clockwise). Output shape is (W, H).
    @staticmethod
    def rotate270(matrix: np.ndarray) -> np.ndarray:
        return np.ascontiguousarray(np.rot90(matrix, k=1, axes=(0, 1)))

    # --------- color ---------
    # Luma (ITU-R 601-2): L = 0.299*R + 0.587*G + 0.114*B. Alpha is kept.
    @staticmethod
    def grayscale(matrix: np.ndarray) -> np.ndarray:
        img = ProcessingService._to_pil(matrix)
        if img.mode in ("L", "LA"):
            return matrix.copy()
        return np.asarray(img.convert("LA" if img.mode == "RGBA" else "L")).copy()

    # --------- resampling ---------
    # Resample to exactly (width, height) with a bicubic filter
    @staticmethod
    def resize(matrix: np.ndarray, width: int, height: int) -> np.ndarray:
        img = ProcessingService._to_pil(matrix)
        out = img.resize((int(width), int(height)), resample=Image.Resampling.BICUBIC)
        return np.asarray(out).copy()

    # Fit inside (max_width, max_height) keeping the aspect ratio, scaling up or down
    @staticmethod
    def thumbnail(
        matrix: np.ndarray,
        max_width: int = THUMBNAIL_SIZE[0],
        max_height: int = THUMBNAIL_SIZE[1],
    ) -> np.ndarray:
        img = ProcessingService._to_pil(matrix)
        out = ImageOps.contain(img, (max_width, max_height), method=Image.Resampling.BICUBIC)
        return np.asarray(out).copy()

    # --------- helpers ---------
    @staticmethod
    def max_pixels() -> int | None:
        return Image.MAX_IMAGE_PIXELS

    @staticmethod
    def _to_array(img: Image.Image) -> np.ndarray:
        # 16-bit grayscale: keep the high byte rather than clipping at 255
        if img.mode == "I" or img.mode.startswith("I;16"):
            wide = np.asarray(img, dtype=np.int64)
            return (np.clip(wide, 0, 65535) >> 8).astype(np.uint8)
        if img.mode not in _ARRAY_MODES:
            has_alpha = "A" in img.getbands() or "transparency" in img.info
            img = img.convert("RGBA" if has_alpha else "RGB")
        return np.asarray(img).copy()

    @staticmethod
    def _to_pil(matrix: np.ndarray) -> Image.Image:
        # fromarray infers L, LA, RGB or RGBA from the channel count
        return Image.fromarray(np.ascontiguousarray(matrix, dtype=np.uint8))
