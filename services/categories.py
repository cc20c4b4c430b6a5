"""Category registry service."""

from typing import List, Optional, Sequence

from db.store import CATEGORIES_KEY, KeyValueStore, load_records, save_records
from logger import get_logger
from models.category import Category, CategoryKind
from tools.registry import reconcile, record_ids

logger = get_logger()


class CategoryService:
    """Owns the in-memory category registry and its stored copy."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._categories: List[Category] = []
        self._unreadable: List[dict] = []

    def load(self) -> List[Category]:
        """Read the registry from storage, replacing the in-memory copy."""
        categories = []
        unreadable = []
        for record in load_records(self.store, CATEGORIES_KEY) or []:
            try:
                categories.append(Category.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable stored category {record!r}: {e}")
                unreadable.append(record)
        self._categories = categories
        self._unreadable = unreadable
        return list(categories)

    def reconcile(self, seeds: Sequence[Category]) -> bool:
        """Add any seed category missing from the registry and save if it changed.

        Args:
            seeds: Seed category definitions.

        Returns:
            True if categories were added.
        """
        merged, changed = reconcile(
            self._categories, seeds, reserved_ids=record_ids(self._unreadable)
        )
        if changed:
            added = [c.id for c in merged[len(self._categories):]]
            logger.info(f"Added seed categories: {', '.join(added)}")
            self._categories = merged
            self.save()
        return changed

    def save(self) -> bool:
        return save_records(
            self.store,
            CATEGORIES_KEY,
            [c.to_dict() for c in self._categories] + self._unreadable,
        )

    def find_all(self, kind: Optional[CategoryKind] = None) -> List[Category]:
        """Get all categories in registry order.

        Args:
            kind: Optional filter; only categories of this kind are returned.

        Returns:
            List of Category objects.
        """
        if kind is None:
            return list(self._categories)
        return [c for c in self._categories if c.kind is kind]

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID, or None if not found."""
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def by_id(self) -> dict:
        return {c.id: c for c in self._categories}
