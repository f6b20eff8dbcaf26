import logging
import shutil
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile

from staynest.api.dependencies import CurrentUser, DbSession
from staynest.core.config import get_settings
from staynest.core.errors import InvalidInputError, UnauthorizedError
from staynest.db import crud_images, crud_listings
from staynest.schemas.image import ImageOut, ImagesUploaded

logger = logging.getLogger("uvicorn.error")

router = APIRouter()


@router.post("/upload", response_model=ImagesUploaded)
async def upload_images(
    db: DbSession,
    current_user: CurrentUser,
    listing_id: Optional[str] = Form(None, alias="listingId"),
    images: Optional[List[UploadFile]] = File(None),
):
    """
    Attach photos to one of the caller's listings. Files are written to
    STATIC_UPLOAD_DIR/<listing id>/ under fresh names and served from
    /static/uploads/.
    """
    if not listing_id:
        raise InvalidInputError("Listing ID is required")
    files = [img for img in images or [] if img.filename]
    if not files:
        raise InvalidInputError("No images uploaded")

    listing = await crud_listings.get_listing(db, listing_id)
    if not listing or listing.host_id != current_user.id:
        raise UnauthorizedError()

    upload_dir = Path(get_settings().STATIC_UPLOAD_DIR) / listing_id
    upload_dir.mkdir(parents=True, exist_ok=True)

    paths: List[str] = []
    for img in files:
        ext = Path(img.filename).suffix.lstrip(".") or "jpg"
        filename = f"{uuid.uuid4().hex}.{ext}"
        with (upload_dir / filename).open("wb") as f:
            shutil.copyfileobj(img.file, f)
        paths.append(f"/static/uploads/{listing_id}/{filename}")

    await crud_images.add_images(db, listing_id, paths)
    logger.info("%d image(s) added to listing %s", len(paths), listing_id)
    return {"message": "Images uploaded successfully", "image_paths": paths}


@router.get("/{listing_id}", response_model=List[ImageOut])
async def listing_images(listing_id: str, db: DbSession):
    return await crud_images.list_images(db, listing_id)
