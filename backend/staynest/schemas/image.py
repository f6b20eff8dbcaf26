# staynest/schemas/image.py
from typing import List

from staynest.schemas.base import APIModel


class ImageOut(APIModel):
    id: str
    image_path: str
    is_featured: bool
    sort_order: int


class ImagesUploaded(APIModel):
    success: bool = True
    message: str
    image_paths: List[str]
