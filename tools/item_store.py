"""
Item Store — Persistent inventory behind a three-call interface.

The session only ever inserts, deletes and enumerates. Two providers:
    InMemoryItemStore  process lifetime only (tests, throwaway sessions)
    JsonItemStore      a JSON file, rewritten on every mutation

Every item passes through InventoryItem validation on the way in, both on
insert and when a file is loaded. Records that fail validation are skipped.
"""

import json
import logging
import os
import tempfile
from typing import List, Optional, Protocol

from pydantic import ValidationError

from models.inventory import InventoryItem

logger = logging.getLogger("ItemStore")

STARTER_ITEMS = ("Knife", "Rope", "Potion")


class ItemStore(Protocol):
    def insert(self, name: Optional[str]) -> InventoryItem:
        ...

    def delete(self, item: InventoryItem) -> bool:
        ...

    def items(self) -> List[InventoryItem]:
        ...


def valid_names(store: ItemStore) -> List[str]:
    """Names of items with a non-empty name, in store order."""
    return [item.name for item in store.items() if item.is_valid]


class InMemoryItemStore:
    """Item store kept in a list. Insertion order is enumeration order."""

    def __init__(self, names: Optional[List[str]] = None):
        self._items: List[InventoryItem] = []
        for name in names or []:
            self.insert(name)

    def insert(self, name: Optional[str]) -> InventoryItem:
        item = InventoryItem(name=name)
        self._items.append(item)
        logger.debug(f"Inserted item: {item.name!r}")
        return item

    def delete(self, item: InventoryItem) -> bool:
        for i, existing in enumerate(self._items):
            if existing.id == item.id:
                del self._items[i]
                logger.debug(f"Deleted item: {item.name!r}")
                return True
        return False

    def items(self) -> List[InventoryItem]:
        return list(self._items)


class JsonItemStore(InMemoryItemStore):
    """Item store persisted to a JSON file.

    The file holds a list of InventoryItem dumps. Writes go to a temp file
    in the same directory and are swapped in with os.replace, so a crash
    never leaves a half-written inventory.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = os.path.abspath(path)
        self._load()

    def _load(self):
        if not os.path.exists(self.path):
            logger.info(f"No inventory file at {self.path}, starting empty")
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read inventory file {self.path}: {e}")
            return

        if not isinstance(raw, list):
            logger.error(f"Inventory file {self.path} is not a list, ignoring")
            return

        for record in raw:
            try:
                self._items.append(InventoryItem.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid inventory record {record!r}: {e}")
        logger.info(f"Loaded {len(self._items)} item(s) from {self.path}")

    def _save(self):
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        payload = [item.model_dump(mode="json") for item in self._items]
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _save_or_restore(self, previous: List[InventoryItem]):
        try:
            self._save()
        except OSError as e:
            # Memory must match what is on disk.
            self._items = previous
            logger.error(f"Could not write inventory file {self.path}: {e}")
            raise

    def insert(self, name: Optional[str]) -> InventoryItem:
        previous = list(self._items)
        item = super().insert(name)
        self._save_or_restore(previous)
        return item

    def delete(self, item: InventoryItem) -> bool:
        previous = list(self._items)
        removed = super().delete(item)
        if removed:
            self._save_or_restore(previous)
        return removed
