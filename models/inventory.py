"""
Inventory item schema — the unit stored by every item store provider.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class InventoryItem(BaseModel):
    """A single item the player carries.

    Names are trimmed on the way in. A blank name is stored as None and the
    item is treated as invalid (pruned on reset, never used as a protected
    spelling term or prompted to the backend).
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_valid(self) -> bool:
        return bool(self.name)
