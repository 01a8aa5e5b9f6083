from __future__ import annotations

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse
from src.infrastructure.api.errors import add_exception_handlers
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.transform_routes import router as transform_router
from src.infrastructure.monitoring.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="PixPipe Backend",
        version="0.1.0",
        description="""
        ## PixPipe Backend API

        Single-endpoint image transformation service built on FastAPI, Pillow and NumPy.

        ### Usage
        `POST /` a multipart form with an `image` file (`.png` or `.jpg`) and a
        `params` field holding a comma-separated command list, for example
        `fliph,grayscale,resize-50`. Commands run left to right and the
        transformed image comes back in the upload's format.

        `GET /` returns the full command reference as plain text.

        ### Error Responses
        Errors are returned as plain text:
        - **400 Bad Request**: Missing file, missing extension or invalid commands
        - **413 Payload Too Large**: Upload exceeds the configured size ceiling
        - **415 Unsupported Media Type**: Not an image, or not PNG/JPEG
        - **422 Unprocessable Entity**: File does not decode, or an operation would empty the image
        - **500 Internal Server Error**: Encoding failed
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)
    add_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return HealthResponse(status="healthy")

    app.include_router(transform_router)
    return app


app = create_app()
