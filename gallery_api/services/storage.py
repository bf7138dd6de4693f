"""
Gallery item storage.

GalleryStorage is the capability set the routes depend on: six reads and
three single-statement mutations. DatabaseGalleryStorage is the production
backend; MemoryGalleryStorage serves tests and database-less development.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.models import GalleryItem
from gallery_api.schemas import GalleryItemRead

logger = logging.getLogger(__name__)

# Column defaults applied when a create payload omits the field
ITEM_DEFAULTS: Dict[str, Any] = {
    "type": "image",
    "video_url": None,
    "height": "h-64",
    "featured": False,
    "tags": None,
}


class GalleryStorage(ABC):
    """Read and write access to gallery items."""

    @abstractmethod
    async def list_all(self) -> List[GalleryItemRead]:
        """Every item, ordered by id."""

    @abstractmethod
    async def list_by_category(self, category: str) -> List[GalleryItemRead]:
        """Items whose category equals `category` exactly."""

    @abstractmethod
    async def list_by_type(self, item_type: str) -> List[GalleryItemRead]:
        """Items whose type equals `item_type` exactly."""

    @abstractmethod
    async def list_featured(self) -> List[GalleryItemRead]:
        """Items flagged as featured."""

    @abstractmethod
    async def search(self, query: str) -> List[GalleryItemRead]:
        """Items whose title, description or category contains `query`, ignoring case."""

    @abstractmethod
    async def get_by_id(self, item_id: int) -> Optional[GalleryItemRead]:
        """A single item, or None."""

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> GalleryItemRead:
        """Persist a validated item and return it with its assigned id."""

    @abstractmethod
    async def update(self, item_id: int, fields: Dict[str, Any]) -> Optional[GalleryItemRead]:
        """Apply a partial update; None if the item does not exist."""

    @abstractmethod
    async def delete(self, item_id: int) -> bool:
        """Remove an item; False if it did not exist."""


class DatabaseGalleryStorage(GalleryStorage):
    """Gallery storage on the gallery_items table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, *criteria) -> List[GalleryItemRead]:
        result = await self.db.execute(
            select(GalleryItem).where(*criteria).order_by(GalleryItem.id.asc())
        )
        return [GalleryItemRead.model_validate(item) for item in result.scalars().all()]

    async def list_all(self) -> List[GalleryItemRead]:
        return await self._fetch()

    async def list_by_category(self, category: str) -> List[GalleryItemRead]:
        return await self._fetch(GalleryItem.category == category)

    async def list_by_type(self, item_type: str) -> List[GalleryItemRead]:
        return await self._fetch(GalleryItem.type == item_type)

    async def list_featured(self) -> List[GalleryItemRead]:
        return await self._fetch(GalleryItem.featured.is_(True))

    async def search(self, query: str) -> List[GalleryItemRead]:
        # autoescape: "%" and "_" in the query match literally
        return await self._fetch(
            or_(
                GalleryItem.title.icontains(query, autoescape=True),
                GalleryItem.description.icontains(query, autoescape=True),
                GalleryItem.category.icontains(query, autoescape=True),
            )
        )

    async def get_by_id(self, item_id: int) -> Optional[GalleryItemRead]:
        result = await self.db.execute(
            select(GalleryItem).where(GalleryItem.id == item_id)
        )
        item = result.scalar_one_or_none()
        return GalleryItemRead.model_validate(item) if item else None

    async def create(self, fields: Dict[str, Any]) -> GalleryItemRead:
        item = GalleryItem(**{**ITEM_DEFAULTS, **fields})
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        logger.info(f"Created gallery item: ID {item.id}")
        return GalleryItemRead.model_validate(item)

    async def update(self, item_id: int, fields: Dict[str, Any]) -> Optional[GalleryItemRead]:
        if not fields:
            return await self.get_by_id(item_id)

        result = await self.db.execute(
            update(GalleryItem)
            .where(GalleryItem.id == item_id)
            .values(**fields)
            .returning(GalleryItem)
            .execution_options(synchronize_session=False)
        )
        item = result.scalar_one_or_none()
        await self.db.commit()
        if item is None:
            return None
        logger.info(f"Updated gallery item: ID {item_id} ({', '.join(sorted(fields))})")
        return GalleryItemRead.model_validate(item)

    async def delete(self, item_id: int) -> bool:
        result = await self.db.execute(
            delete(GalleryItem).where(GalleryItem.id == item_id)
        )
        await self.db.commit()
        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info(f"Deleted gallery item: ID {item_id}")
        return deleted


class MemoryGalleryStorage(GalleryStorage):
    """
    Gallery storage held in a dict.
    Ids are never reused, matching a database sequence.
    """

    def __init__(self):
        self._items: Dict[int, GalleryItemRead] = {}
        self._next_id = 1

    def _ordered(self) -> List[GalleryItemRead]:
        return [self._items[key] for key in sorted(self._items)]

    async def list_all(self) -> List[GalleryItemRead]:
        return self._ordered()

    async def list_by_category(self, category: str) -> List[GalleryItemRead]:
        return [item for item in self._ordered() if item.category == category]

    async def list_by_type(self, item_type: str) -> List[GalleryItemRead]:
        return [item for item in self._ordered() if item.type == item_type]

    async def list_featured(self) -> List[GalleryItemRead]:
        return [item for item in self._ordered() if item.featured]

    async def search(self, query: str) -> List[GalleryItemRead]:
        needle = query.lower()
        return [
            item for item in self._ordered()
            if needle in item.title.lower()
            or needle in item.description.lower()
            or needle in item.category.lower()
        ]

    async def get_by_id(self, item_id: int) -> Optional[GalleryItemRead]:
        return self._items.get(item_id)

    async def create(self, fields: Dict[str, Any]) -> GalleryItemRead:
        item = GalleryItemRead(id=self._next_id, **{**ITEM_DEFAULTS, **fields})
        self._items[item.id] = item
        self._next_id += 1
        return item

    async def update(self, item_id: int, fields: Dict[str, Any]) -> Optional[GalleryItemRead]:
        current = self._items.get(item_id)
        if current is None:
            return None
        updated = current.model_copy(update=fields)
        self._items[item_id] = updated
        return updated

    async def delete(self, item_id: int) -> bool:
        return self._items.pop(item_id, None) is not None
