from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from src.application.use_cases.transform_image import TransformImageUseCase
from src.domain.services.processing_service import ProcessingService
from src.infrastructure.config.settings import Settings, get_settings


def get_processing_service() -> ProcessingService:
    return ProcessingService()


def get_transform_use_case(
    processing: Annotated[ProcessingService, Depends(get_processing_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TransformImageUseCase:
    return TransformImageUseCase(processing=processing, jpeg_quality=settings.jpeg_quality)
