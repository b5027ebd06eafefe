"""Image listing and catalog read routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from image_dock.core.dependencies import get_image_catalog, get_listing_service
from image_dock.core.exceptions import NotFoundError
from image_dock.services.catalog import ImageCatalog
from image_dock.services.listing import ListingService

router = APIRouter(prefix="/images", tags=["images"])


class ImageRecordResponse(BaseModel):
    """Schema for a catalog record."""

    id: int
    filename: str
    s3_key: str
    s3_bucket: str
    url: str | None
    uploaded_at: datetime | None
    category: str
    sub_category: str
    name: str

    model_config = {"from_attributes": True}


@router.get("", response_model=list[str])
async def list_images(service: ListingService = Depends(get_listing_service)) -> list[str]:
    """Public URLs of every object under the upload prefix."""
    return await service.list_image_urls()


@router.get("/records", response_model=list[ImageRecordResponse])
async def list_image_records(
    category: str | None = Query(None, description="Filter by category"),
    sub_category: str | None = Query(None, description="Filter by sub-category"),
    catalog: ImageCatalog = Depends(get_image_catalog),
):
    """Catalog rows, newest first."""
    return await catalog.list_all(category=category, sub_category=sub_category)


@router.get("/records/{image_id}", response_model=ImageRecordResponse)
async def get_image_record(image_id: int, catalog: ImageCatalog = Depends(get_image_catalog)):
    """One catalog row by id."""
    record = await catalog.get_by_id(image_id)
    if record is None:
        raise NotFoundError(message=f"Image with id {image_id} not found", detail={"image_id": image_id})
    return record
