"""
Admin API routes for gallery content management.
All endpoints require an authenticated session.
"""
from fastapi import APIRouter, Depends, Response, status
import logging

from gallery_api.dependencies import get_current_user, get_gallery_storage
from gallery_api.models import User
from gallery_api.schemas import GalleryItemCreate, GalleryItemRead, GalleryItemUpdate
from gallery_api.services.storage import GalleryStorage
from gallery_api.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/gallery", response_model=GalleryItemRead, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    payload: GalleryItemCreate,
    current_user: User = Depends(get_current_user),
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """
    Create a gallery item.
    Requires authentication.

    Args:
        payload: Item fields without id (validated strictly)

    Returns:
        GalleryItemRead: Stored item including its assigned id
    """
    item = await storage.create(payload.model_dump())
    logger.info(f"User '{current_user.username}' created gallery item {item.id}")
    return item


@router.put("/gallery/{item_id}", response_model=GalleryItemRead)
async def update_gallery_item(
    item_id: int,
    payload: GalleryItemUpdate,
    current_user: User = Depends(get_current_user),
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """
    Partially update a gallery item; fields absent from the body keep their values.
    Requires authentication.

    Raises:
        NotFoundError: 404 if no item has this id
    """
    item = await storage.update(item_id, payload.changes())
    if item is None:
        raise NotFoundError("Gallery item not found")
    logger.info(f"User '{current_user.username}' updated gallery item {item_id}")
    return item


@router.delete("/gallery/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    storage: GalleryStorage = Depends(get_gallery_storage),
):
    """
    Delete a gallery item.
    Requires authentication.

    Raises:
        NotFoundError: 404 if no item has this id
    """
    deleted = await storage.delete(item_id)
    if not deleted:
        raise NotFoundError("Gallery item not found")
    logger.info(f"User '{current_user.username}' deleted gallery item {item_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
