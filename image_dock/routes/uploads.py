"""Upload endpoint.

Run the application and test:
    curl -F "image=@My Photo.png" -F category=shoes -F sub_category=running \
         -F name=AirMax http://localhost:8080/upload
"""

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from image_dock.core.dependencies import get_storage_config, get_upload_service
from image_dock.core.exceptions import BadRequestError
from image_dock.main_config import StorageConfig
from image_dock.services.uploads import ImageMetadata, UploadResponse, UploadService

router = APIRouter(tags=["uploads"])

# Mount at the application root: POST /upload
ROUTER_CONFIG = {"prefix": ""}

IMAGE_FIELD = "image"

logger = structlog.get_logger(__name__)


def _text_field(form: FormData, name: str) -> str:
    value = form.get(name)
    return value if isinstance(value, str) else ""


def _form_too_large(request: Request, max_bytes: int) -> bool:
    content_length = request.headers.get("content-length", "")
    return content_length.isdigit() and int(content_length) > max_bytes


async def read_upload_form(request: Request, max_bytes: int) -> FormData:
    """Parse the multipart body, enforcing the total size ceiling.

    Raises:
        BadRequestError: If the body is malformed or larger than ``max_bytes``
    """
    if _form_too_large(request, max_bytes):
        raise BadRequestError("Failed to parse form", detail={"max_bytes": max_bytes})

    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        logger.warning("form_parse_failed", error=str(e))
        raise BadRequestError("Failed to parse form") from e

    # Content-Length can be absent on chunked requests
    total = sum(value.size or 0 for _, value in form.multi_items() if isinstance(value, UploadFile))
    if total > max_bytes:
        await form.close()
        raise BadRequestError("Failed to parse form", detail={"max_bytes": max_bytes})

    return form


@router.options("/upload")
async def upload_preflight() -> Response:
    """Bare 200 for CORS preflight requests that reach the router."""
    return Response(status_code=status.HTTP_200_OK)


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    service: UploadService = Depends(get_upload_service),
    config: StorageConfig = Depends(get_storage_config),
) -> UploadResponse:
    """Store an image in the bucket and record its metadata.

    Form fields: ``image`` (file, required), ``category``, ``sub_category``,
    ``name``, ``product_name`` (text, optional).
    """
    form = await read_upload_form(request, config.upload_max_bytes)
    try:
        image = form.get(IMAGE_FIELD)
        # Browsers send an empty-filename part when no file was chosen
        if not isinstance(image, UploadFile) or not image.filename:
            raise BadRequestError("File not found", error_code="FileNotFound", detail={"field": IMAGE_FIELD})

        metadata = ImageMetadata(
            category=_text_field(form, "category"),
            sub_category=_text_field(form, "sub_category"),
            name=_text_field(form, "name"),
            product_name=_text_field(form, "product_name") or None,
        )
        await image.seek(0)
        return await service.upload(
            filename=image.filename or "",
            body=image.file,
            metadata=metadata,
            content_type=image.content_type,
        )
    finally:
        await form.close()
