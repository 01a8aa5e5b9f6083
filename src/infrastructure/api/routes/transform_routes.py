from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from src.application.use_cases.transform_image import TransformImageUseCase
from src.domain.errors import NoFileProvided, NotAnImage, PayloadTooLarge
from src.domain.services import command_parser
from src.infrastructure.api.dependencies import get_transform_use_case
from src.infrastructure.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

USAGE = """\
Image transform API

POST / with a multipart form containing:
  image   the picture to transform (.png or .jpg)
  params  a comma-separated list of commands, applied left to right

Commands:
  fliph            mirror left-right
  flipv            mirror top-bottom
  rotateleft       rotate 90 degrees counter-clockwise
  rotateright      rotate 90 degrees clockwise
  rotate-<deg>     rotate by an arbitrary angle (accepted, not yet applied)
  grayscale        convert to grayscale
  resize-<pct>     scale both sides to <pct> percent
  thumbnail        fit inside a 100x100 box, keeping the aspect ratio

Command names are case-sensitive. The response has the same format as the upload.

Example:
  curl -F image=@photo.jpg -F params=fliph,grayscale,resize-50 http://localhost:8000/ -o out.jpg
"""

router = APIRouter(
    tags=["Image Transform"],
    responses={
        400: {"description": "Bad Request - Missing file, missing extension or invalid commands"},
        413: {"description": "Payload Too Large - File size exceeds limit"},
        415: {"description": "Unsupported Media Type - Not an image, or not PNG/JPEG"},
        422: {"description": "Unprocessable - File does not decode, or result would be empty or too large"},
    },
)


DEFAULT_DOWNLOAD_NAME = "Image"


def content_disposition(file_name: str | None) -> str:
    file_name = file_name or DEFAULT_DOWNLOAD_NAME
    quoted = quote(file_name)
    if quoted != file_name:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{file_name}"'


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Usage",
    description="Describe the command grammar with an example invocation",
)
def usage() -> str:
    return USAGE


@router.post(
    "/",
    response_class=Response,
    summary="Transform Image",
    description="""
    Apply a comma-separated list of commands to an uploaded PNG or JPEG image.

    **Form fields:**
    - `image` - the image file; its extension (`png` or `jpg`) selects the codec
    - `params` - commands such as `fliph,grayscale,resize-50`

    **Response**: the transformed image in the same format as the upload.
    Errors are returned as plain text.
    """,
    response_description="The transformed image bytes",
)
async def transform_image(
    image: UploadFile | None = File(None, description="PNG or JPEG image to transform"),
    params: str | None = Form(None, description="Comma-separated command list"),
    settings: Settings = Depends(get_settings),
    uc: TransformImageUseCase = Depends(get_transform_use_case),
):
    data = b""
    if image is not None:
        if not (image.content_type or "").startswith("image/"):
            raise NotAnImage()
        data = await image.read(settings.max_upload_bytes + 1)
        if len(data) > settings.max_upload_bytes:
            raise PayloadTooLarge()

    operations = command_parser.parse(params)

    if image is None:
        raise NoFileProvided()

    result = await run_in_threadpool(uc.run, data, image.filename, operations)
    logger.info(
        "Transformed %s (%s) with %d operation(s) -> %dx%d, %d bytes",
        image.filename,
        result.format.name,
        result.operations_applied,
        result.width,
        result.height,
        len(result.content),
    )

    return Response(
        content=result.content,
        media_type=result.format.content_type,
        headers={"Content-Disposition": content_disposition(image.filename)},
    )
