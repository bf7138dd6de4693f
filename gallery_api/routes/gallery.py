"""
Gallery routes for public gallery browsing.
Provides endpoints for listing, filtering and fetching gallery items.
"""
from fastapi import APIRouter, Depends
from typing import List, Literal, Optional
import logging

from gallery_api.dependencies import get_gallery_storage
from gallery_api.schemas import GalleryItemRead
from gallery_api.services.gallery import list_categories, query_gallery
from gallery_api.services.storage import GalleryStorage
from gallery_api.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/gallery")


@router.get("", response_model=List[GalleryItemRead])
async def get_gallery_items(
    category: Optional[str] = None,
    search: Optional[str] = None,
    type: Optional[str] = None,
    featured: Optional[Literal["true", "false"]] = None,
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """
    List gallery items.

    Only one filter is applied per request, by precedence:
    search, then featured=true, then type, then category.

    Args:
        category: Exact category match ("all" means no filter)
        search: Case-insensitive match on title, description or category
        type: Exact type match, e.g. "image" or "video" ("all" means no filter)
        featured: "true" to list featured items only

    Returns:
        List[GalleryItemRead]: Matching items
    """
    return await query_gallery(
        storage,
        category=category,
        search=search,
        item_type=type,
        featured=featured,
    )


# Declared before /{item_id} so "categories" is not parsed as an id
@router.get("/categories", response_model=List[str])
async def get_gallery_categories(
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """Distinct categories present in the gallery."""
    return await list_categories(storage)


@router.get("/{item_id}", response_model=GalleryItemRead)
async def get_gallery_item(
    item_id: int,
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """
    Get a single gallery item.

    Raises:
        NotFoundError: 404 if no item has this id
    """
    item = await storage.get_by_id(item_id)
    if item is None:
        raise NotFoundError("Gallery item not found")
    return item
