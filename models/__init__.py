"""
Pydantic v2 data models — the contract for all session state.

Health and gold clamp themselves; inventory items normalize their names.
Nothing outside these models enforces those invariants.
"""

from models.inventory import InventoryItem
from models.player_state import HealthState, GoldState
from models.messages import Message, Role, TextSegment
from models.gameplay import (
    GameplayMode,
    SpellCheckResult,
    ContinuationResult,
    TurnResult,
)

__all__ = [
    "InventoryItem",
    "HealthState",
    "GoldState",
    "Message",
    "Role",
    "TextSegment",
    "GameplayMode",
    "SpellCheckResult",
    "ContinuationResult",
    "TurnResult",
]
