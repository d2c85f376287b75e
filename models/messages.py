"""
Chat message schema for the story log.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    STORY = "story"


class TextSegment(BaseModel):
    """A run of message text. `corrected` marks spans the spell checker replaced."""

    text: str
    corrected: bool = False


class Message(BaseModel):
    """One entry in the session's story log.

    `text` is the semantic text fed back to the backend as history.
    `segments` carries correction markup for display and, when present,
    joins to the same string as `text`.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Role
    text: str
    segments: Optional[List[TextSegment]] = None
    remaining_allowance: Optional[int] = None

    @property
    def display_text(self) -> str:
        if self.segments:
            return "".join(s.text for s in self.segments)
        return self.text

    @property
    def corrections(self) -> List[str]:
        """Replacement words the spell checker inserted, in order."""
        return [s.text for s in (self.segments or []) if s.corrected]
