# staynest/db/crud_images.py
from typing import List

from sqlalchemy import case, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.db.models import ListingImage


async def list_images(db: AsyncSession, listing_id: str) -> List[ListingImage]:
    res = await db.execute(
        select(ListingImage)
        .where(ListingImage.listing_id == listing_id)
        .order_by(ListingImage.sort_order.asc())
    )
    return list(res.scalars().all())


async def add_images(db: AsyncSession, listing_id: str, paths: List[str]) -> List[ListingImage]:
    """
    Append images after the ones the listing already has. The first image a
    listing ever gets is its featured one.
    """
    res = await db.execute(
        select(
            func.max(ListingImage.sort_order),
            func.coalesce(
                func.sum(case((ListingImage.is_featured.is_(True), 1), else_=0)), 0
            ),
        ).where(ListingImage.listing_id == listing_id)
    )
    last_order, featured_count = res.one()
    next_order = 0 if last_order is None else last_order + 1

    images = []
    for i, path in enumerate(paths):
        image = ListingImage(
            listing_id=listing_id,
            image_path=path,
            is_featured=(featured_count == 0 and i == 0),
            sort_order=next_order + i,
        )
        db.add(image)
        images.append(image)

    await db.commit()
    for image in images:
        await db.refresh(image)
    return images
