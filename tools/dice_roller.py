"""
Dice Roller — d20 rolls for Dice Roll mode.

The roll is a neutral note on the player's action. It never changes health
or gold and never stops the story from continuing.
"""

import logging
import random
from typing import Optional

logger = logging.getLogger("DiceRoller")

D20_FACES = 20


def roll_d20(rng: Optional[random.Random] = None) -> int:
    """Roll a single d20 (uniform 1..20). Pass `rng` for deterministic rolls."""
    roller = rng or random
    return roller.randint(1, D20_FACES)


def annotate_roll(text: str, roll: int) -> str:
    """Append the roll to an action: 'I open the door\\n(Rolled d20: 14)'."""
    return f"{text}\n(Rolled d20: {roll})"


def roll_and_annotate(text: str, rng: Optional[random.Random] = None) -> str:
    roll = roll_d20(rng)
    logger.info(f"Rolled d20: {roll}")
    return annotate_roll(text, roll)
