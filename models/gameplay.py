"""
Turn-level schemas: gameplay mode and the transient results passed between
the spell checker, the storyteller and the session.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.messages import Message, TextSegment


class GameplayMode(str, Enum):
    """Transform applied to every player action."""

    SPELLING_CHECK = "Spelling Check"
    DICE_ROLL = "Dice Roll"


class SpellCheckResult(BaseModel):
    segments: List[TextSegment] = Field(default_factory=list)
    remaining_allowance: int = 5
    corrected_text: str = ""
    mistakes: int = 0


class ContinuationResult(BaseModel):
    """Output of one storyteller call, after award tags are stripped."""

    text: str
    awarded_items: List[str] = Field(default_factory=list)
    awarded_gold: int = Field(default=0, ge=0)
    is_fallback: bool = False


class TurnResult(BaseModel):
    """What a single `send_action` call did to the session.

    `alert` is set when the caller must interrupt the player (for example the
    generation capability is switched off); in that case no story message is
    appended for the turn.
    """

    messages: List[Message] = Field(default_factory=list)
    alert: Optional[str] = None
    generation_skipped: bool = False
    damage_taken: int = 0
    awarded_items: List[str] = Field(default_factory=list)
    awarded_gold: int = 0
