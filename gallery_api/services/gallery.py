"""
Gallery query rules shared by the public routes.
"""
from typing import List, Optional
import logging

from gallery_api.schemas import GalleryItemRead
from gallery_api.services.storage import GalleryStorage

logger = logging.getLogger(__name__)

# Filter value the frontend sends for "no filter"
ALL = "all"


async def query_gallery(
    storage: GalleryStorage,
    category: Optional[str] = None,
    search: Optional[str] = None,
    item_type: Optional[str] = None,
    featured: Optional[str] = None,
) -> List[GalleryItemRead]:
    """
    Resolve the gallery listing for a set of query parameters.

    Filters are not combined: the first applicable one wins, in the order
    search, featured, type, category. With none of them, every item is returned.

    Args:
        storage: Gallery storage backend
        category: Exact category, ignored when empty or "all"
        search: Case-insensitive substring, ignored when empty
        item_type: Exact type, ignored when empty or "all"
        featured: "true" selects featured items; "false" applies no filter

    Returns:
        List[GalleryItemRead]: Matching items
    """
    if search:
        items = await storage.search(search)
        applied = f"search={search!r}"
    elif featured == "true":
        items = await storage.list_featured()
        applied = "featured"
    elif item_type and item_type != ALL:
        items = await storage.list_by_type(item_type)
        applied = f"type={item_type!r}"
    elif category and category != ALL:
        items = await storage.list_by_category(category)
        applied = f"category={category!r}"
    else:
        items = await storage.list_all()
        applied = "none"

    logger.info(f"Retrieved {len(items)} gallery items (filter: {applied})")
    return items


async def list_categories(storage: GalleryStorage) -> List[str]:
    """Distinct categories in the order they first appear in the full listing."""
    items = await storage.list_all()
    return list(dict.fromkeys(item.category for item in items))
