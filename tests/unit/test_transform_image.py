"""
Tests for the transform pipeline use case.
"""
from __future__ import annotations

import io
from unittest.mock import Mock

import numpy as np
import pytest
from PIL import Image

from src.application.use_cases.transform_image import TransformImageUseCase
from src.domain.entities.image_format import SupportedFormat
from src.domain.entities.operation import (
    ConvertToGray,
    FlipHorizontal,
    FlipVertical,
    Resize,
    Rotate,
    RotateLeft,
    RotateRight,
    Thumbnail,
)
from src.domain.errors import DecodeError, EmptyImageResult, OversizedImage, UnsupportedFormat
from src.domain.services.processing_service import ProcessingService


@pytest.fixture
def uc() -> TransformImageUseCase:
    return TransformImageUseCase(processing=ProcessingService())


def random_image(h: int, w: int, channels: int = 3) -> np.ndarray:
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(h, w, channels), dtype=np.uint8)


class TestExecute:
    """Folding operations over an in-memory image."""

    def test_empty_sequence_returns_original(self, uc):
        img = random_image(10, 20)
        assert uc.execute(img, []) is img

    def test_double_flip_is_identity(self, uc):
        img = random_image(10, 20)
        out = uc.execute(img, [FlipHorizontal(), FlipHorizontal()])
        assert np.array_equal(out, img)

    def test_four_right_rotations_are_identity(self, uc):
        img = random_image(7, 13)
        out = uc.execute(img, [RotateRight()] * 4)
        assert np.array_equal(out, img)

    def test_rotate_left_undoes_rotate_right(self, uc):
        img = random_image(7, 13)
        out = uc.execute(img, [RotateRight(), RotateLeft()])
        assert np.array_equal(out, img)

    def test_resize_half(self, uc):
        out = uc.execute(random_image(100, 200), [Resize(50)])
        assert out.shape[:2] == (50, 100)

    def test_resize_truncates(self, uc):
        # 33% of 10 is 3.3 and of 25 is 8.25
        out = uc.execute(random_image(10, 25), [Resize(33)])
        assert out.shape[:2] == (3, 8)

    def test_resize_to_zero_is_flagged(self, uc):
        with pytest.raises(EmptyImageResult):
            uc.execute(random_image(10, 10), [Resize(0)])
        with pytest.raises(EmptyImageResult):
            uc.execute(random_image(50, 50), [Resize(1)])

    def test_resize_above_pixel_limit_is_flagged(self):
        processing = Mock()
        processing.max_pixels.return_value = 1000
        uc = TransformImageUseCase(processing=processing)

        with pytest.raises(OversizedImage):
            uc.execute(random_image(10, 10), [Resize(400)])

        assert processing.resize.call_count == 0

    def test_resize_without_pixel_limit(self):
        processing = Mock()
        processing.max_pixels.return_value = None
        uc = TransformImageUseCase(processing=processing)

        uc.execute(random_image(10, 10), [Resize(400)])

        processing.resize.assert_called_once()
        assert processing.resize.call_args[0][1:] == (40, 40)

    def test_thumbnail_preserves_aspect(self, uc):
        out = uc.execute(random_image(300, 600), [Thumbnail()])
        h, w = out.shape[:2]
        assert max(h, w) <= 100
        assert (w, h) == (100, 50)

    def test_rotate_is_a_no_op(self, uc):
        img = random_image(10, 20)
        out = uc.execute(img, [Rotate(45)])
        assert np.array_equal(out, img)

    def test_grayscale_drops_color_channels(self, uc):
        out = uc.execute(random_image(4, 4), [ConvertToGray()])
        assert out.ndim == 2

    def test_operations_apply_in_order(self):
        processing = Mock()
        calls = []
        processing.flip_vertical.side_effect = lambda m: calls.append("flipv") or m
        processing.grayscale.side_effect = lambda m: calls.append("grayscale") or m
        processing.rotate90.side_effect = lambda m: calls.append("rotate90") or m

        uc = TransformImageUseCase(processing=processing)
        uc.execute(random_image(4, 4), [ConvertToGray(), FlipVertical(), RotateRight(), ConvertToGray()])

        assert calls == ["grayscale", "flipv", "rotate90", "grayscale"]

    def test_each_step_receives_previous_result(self):
        first = np.zeros((2, 2), dtype=np.uint8)
        second = np.ones((2, 2), dtype=np.uint8)
        processing = Mock()
        processing.flip_horizontal.return_value = first
        processing.flip_vertical.return_value = second

        uc = TransformImageUseCase(processing=processing)
        out = uc.execute(random_image(2, 2), [FlipHorizontal(), FlipVertical()])

        processing.flip_vertical.assert_called_once_with(first)
        assert out is second


class TestRun:
    """Format resolution, decode and encode around the fold."""

    def _png(self, w=40, h=20) -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (w, h), (10, 200, 30)).save(buf, format="PNG")
        return buf.getvalue()

    def test_round_trip_without_operations(self, uc):
        result = uc.run(self._png(), "photo.png", [])
        assert result.format is SupportedFormat.PNG
        assert (result.width, result.height) == (40, 20)
        assert result.operations_applied == 0
        decoded = Image.open(io.BytesIO(result.content))
        assert decoded.format == "PNG"
        assert decoded.size == (40, 20)

    def test_output_format_follows_input(self, uc):
        buf = io.BytesIO()
        Image.new("RGB", (16, 8), (90, 90, 90)).save(buf, format="JPEG")
        result = uc.run(buf.getvalue(), "photo.jpg", [RotateRight()])
        decoded = Image.open(io.BytesIO(result.content))
        assert decoded.format == "JPEG"
        assert decoded.size == (8, 16)

    def test_format_is_resolved_before_decode(self):
        processing = Mock()
        uc = TransformImageUseCase(processing=processing)

        with pytest.raises(UnsupportedFormat):
            uc.run(b"whatever", "photo.gif", [FlipHorizontal()])

        assert processing.decode.call_count == 0
        assert processing.encode.call_count == 0

    def test_decode_error_stops_pipeline(self):
        processing = Mock()
        processing.decode.side_effect = DecodeError()
        uc = TransformImageUseCase(processing=processing)

        with pytest.raises(DecodeError):
            uc.run(b"garbage", "photo.png", [FlipHorizontal()])

        assert processing.flip_horizontal.call_count == 0
        assert processing.encode.call_count == 0

    def test_encode_uses_resolved_format_and_quality(self):
        processing = Mock()
        processing.decode.return_value = np.zeros((3, 5, 3), dtype=np.uint8)
        processing.encode.return_value = b"jpeg-bytes"
        uc = TransformImageUseCase(processing=processing, jpeg_quality=80)

        result = uc.run(b"raw", "photo.jpg", [])

        processing.decode.assert_called_once_with(b"raw", SupportedFormat.JPEG)
        assert processing.encode.call_args[0][1] is SupportedFormat.JPEG
        assert processing.encode.call_args[1]["quality"] == 80
        assert result.content == b"jpeg-bytes"
        assert (result.width, result.height) == (5, 3)
