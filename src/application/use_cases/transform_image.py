from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Sequence, assert_never

import numpy as np

from src.domain.entities.image_format import SupportedFormat
from src.domain.entities.operation import (
    ConvertToGray,
    FlipHorizontal,
    FlipVertical,
    Operation,
    Resize,
    Rotate,
    RotateLeft,
    RotateRight,
    Thumbnail,
)
from src.domain.errors import EmptyImageResult, OversizedImage
from src.domain.services import format_resolver
from src.domain.services.processing_service import ProcessingService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    content: bytes
    format: SupportedFormat
    width: int
    height: int
    operations_applied: int


@dataclass
class TransformImageUseCase:
    """
    Apply an ordered list of operations to an uploaded image.

    Once the command list is parsed, the rest of a request is strictly sequential:
    1. Resolve the codec from the file name
    2. Decode the upload with that codec
    3. Fold the operations over the decoded image
    4. Encode the result with the same codec

    The first failure aborts the request; there is no partial result.
    """

    processing: ProcessingService
    jpeg_quality: int = 95

    def run(
        self, data: bytes, file_name: str | None, operations: Sequence[Operation]
    ) -> TransformResult:
        """
        Run the whole pipeline on raw upload bytes.

        Args:
            data: Raw bytes of the uploaded image
            file_name: Name of the uploaded file, used to pick PNG or JPEG
            operations: Parsed operations, applied in order

        Returns:
            TransformResult with the encoded image and its dimensions

        Raises:
            ImageApiError: On the first format, decode, execution or encode failure
        """
        fmt = format_resolver.resolve(file_name)
        image = self.processing.decode(data, fmt)
        out = self.execute(image, operations)
        content = self.processing.encode(out, fmt, quality=self.jpeg_quality)
        height, width = out.shape[:2]
        return TransformResult(
            content=content,
            format=fmt,
            width=width,
            height=height,
            operations_applied=len(operations),
        )

    def execute(self, image: np.ndarray, operations: Sequence[Operation]) -> np.ndarray:
        """Thread the image through every operation in order and return the last result."""
        return reduce(self._apply_operation, operations, image)

    def _apply_operation(self, matrix: np.ndarray, operation: Operation) -> np.ndarray:
        logger.debug("Applying %s to %sx%s image", operation, matrix.shape[1], matrix.shape[0])

        if isinstance(operation, FlipHorizontal):
            return self.processing.flip_horizontal(matrix)
        elif isinstance(operation, FlipVertical):
            return self.processing.flip_vertical(matrix)
        elif isinstance(operation, RotateLeft):
            return self.processing.rotate270(matrix)
        elif isinstance(operation, RotateRight):
            return self.processing.rotate90(matrix)
        elif isinstance(operation, Rotate):
            # Arbitrary-angle rotation is not implemented; the image passes through.
            logger.debug("Ignoring rotate by %s degrees", operation.degrees)
            return matrix
        elif isinstance(operation, ConvertToGray):
            return self.processing.grayscale(matrix)
        elif isinstance(operation, Resize):
            height, width = matrix.shape[:2]
            # Truncating integer arithmetic, not rounding
            new_width = width * operation.percent // 100
            new_height = height * operation.percent // 100
            if new_width == 0 or new_height == 0:
                raise EmptyImageResult(
                    f"resize-{operation.percent} turns a {width}x{height} image "
                    f"into {new_width}x{new_height}."
                )
            limit = self.processing.max_pixels()
            if limit is not None and new_width * new_height > limit:
                raise OversizedImage(
                    f"resize-{operation.percent} turns a {width}x{height} image "
                    f"into {new_width}x{new_height}, above the {limit} pixel limit."
                )
            return self.processing.resize(matrix, new_width, new_height)
        elif isinstance(operation, Thumbnail):
            return self.processing.thumbnail(matrix)
        else:
            assert_never(operation)
