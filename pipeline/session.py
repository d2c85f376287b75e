"""
StorySession — The turn pipeline and session state machine.

One session per player. Each call to send_action runs a single turn:

    trim input -> append user message -> gameplay-mode transform
        -> (penalty short-circuit | privileged advisory | generation)
        -> apply awards -> append story message

Turns never overlap. Health, gold and inventory are only mutated once the
storyteller has fully returned, so a cancelled turn leaves them untouched.
"""

import asyncio
import logging
import random
from typing import List, Optional

from agents.generation_errors import GenerationDisabledError
from agents.storyteller import StorytellerAgent
from models.gameplay import GameplayMode, TurnResult
from models.messages import Message, Role
from models.player_state import GoldState, HealthState
from tools.content_filter import sanitize_story_text
from tools.dice_roller import roll_and_annotate
from tools.environment import is_privileged_process
from tools.item_store import STARTER_ITEMS, ItemStore, valid_names
from tools.spell_checker import analyze
from tools.spelling_dictionary import SpellingDictionary

logger = logging.getLogger("StorySession")

INTRO_MESSAGE = (
    "To begin a story, give me some input describing what kind of story you would "
    "like to play. You can only use items you currently have in your inventory."
)
PRIVILEGED_ADVISORY = (
    "Story generation is unavailable when running as root. "
    "Please run the app as a standard user to continue the story."
)
NO_BACKEND_ADVISORY = (
    "No story generation backend is configured. Set GEMINI_API_KEY to enable it; "
    "until then the story continues with simple fallback text."
)
DISABLED_ALERT = "Story generation is disabled. Enable it in settings to continue the story."

STARTING_HEALTH = 100
STARTING_GOLD = 100

# Spelling mode: below this allowance the action backfires.
PENALTY_THRESHOLD = 3


class TurnInProgressError(RuntimeError):
    """send_action was called while a previous turn was still running."""
    pass


def spelling_penalty(remaining_allowance: int) -> int:
    """HP lost for a poorly spelled action (allowance 2 -> 10, 1 -> 30, 0 -> 50)."""
    if remaining_allowance >= PENALTY_THRESHOLD:
        return 0
    if remaining_allowance == 2:
        return 10
    if remaining_allowance == 1:
        return 30
    return 50


def penalty_message(remaining_allowance: int, penalty: int) -> str:
    if remaining_allowance == 2:
        return f"Your muddled words cause a minor mishap. You stumble and scrape your knee. (-{penalty} HP)"
    if remaining_allowance == 1:
        return f"Your garbled command backfires. A trap snaps at your legs, leaving you limping. (-{penalty} HP)"
    return (
        "The world misreads your intent entirely. A hidden force strikes hard, "
        f"knocking the wind from you. (-{penalty} HP)"
    )


class StorySession:
    """Owns the message log and drives turns against injected collaborators.

    Args:
        item_store: Persistent inventory (insert/delete/enumerate).
        dictionary: Spelling provider used in Spelling Check mode.
        storyteller: Continuation generator.
        health: Health state to mutate. Defaults to 100/100.
        gold: Gold state to mutate. Defaults to 100 coins.
        mode: Starting gameplay mode.
        privileged: Force the privileged-process check; None probes the process.
        turn_delay: Seconds to pause before calling the backend (pacing).
        rng: Random source for dice rolls.
    """

    def __init__(
        self,
        item_store: ItemStore,
        dictionary: SpellingDictionary,
        storyteller: StorytellerAgent,
        health: Optional[HealthState] = None,
        gold: Optional[GoldState] = None,
        mode: GameplayMode = GameplayMode.SPELLING_CHECK,
        privileged: Optional[bool] = None,
        turn_delay: float = 1.0,
        rng: Optional[random.Random] = None,
    ):
        self.item_store = item_store
        self.dictionary = dictionary
        self.storyteller = storyteller
        self.health = health if health is not None else HealthState(current=STARTING_HEALTH, total=STARTING_HEALTH)
        self.gold = gold if gold is not None else GoldState(coins=STARTING_GOLD)
        self.privileged = is_privileged_process() if privileged is None else privileged
        self.turn_delay = turn_delay
        self.rng = rng or random.Random()

        self._mode = GameplayMode(mode)
        self._messages: List[Message] = []
        self._processing = False
        self._lock = asyncio.Lock()

        self._seed_items_if_needed()
        self._messages.append(Message(role=Role.STORY, text=INTRO_MESSAGE))

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def gameplay_mode(self) -> GameplayMode:
        return self._mode

    def inventory_names(self) -> List[str]:
        return valid_names(self.item_store)

    def startup_advisory(self) -> Optional[str]:
        """Message the caller should show before the first turn, if any."""
        if self.privileged:
            return PRIVILEGED_ADVISORY
        if self.storyteller.backend is None:
            return NO_BACKEND_ADVISORY
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_gameplay_mode(self, mode: GameplayMode):
        self._mode = GameplayMode(mode)
        logger.info(f"Gameplay mode set to {self._mode.value}")

    def remove_item(self, item_id: str) -> bool:
        for item in self.item_store.items():
            if item.id == item_id:
                return self.item_store.delete(item)
        return False

    def reset_session(self):
        """Start over: empty log, full health, 100 gold, starter inventory only."""
        self._messages.clear()

        self.health.set_total(max(self.health.total, STARTING_HEALTH))
        self.health.restore()
        self.gold.set(STARTING_GOLD)

        seen = set()
        for item in self.item_store.items():
            if not item.is_valid or item.name not in STARTER_ITEMS or item.name in seen:
                self.item_store.delete(item)
                continue
            seen.add(item.name)
        for name in STARTER_ITEMS:
            if name not in seen:
                self.item_store.insert(name)

        self._messages.append(Message(role=Role.STORY, text=INTRO_MESSAGE))
        logger.info("Session reset")

    async def send_action(self, text: str) -> TurnResult:
        """Run one turn for the player's raw input.

        Returns a TurnResult listing the messages appended (including the
        user's own). Blank input is ignored and returns an empty result.

        Raises:
            TurnInProgressError: a previous turn has not finished.
        """
        trimmed = (text or "").strip()
        if not trimmed:
            return TurnResult()

        if self._lock.locked():
            raise TurnInProgressError("A turn is already being processed.")

        async with self._lock:
            self._processing = True
            try:
                return await self._run_turn(trimmed)
            finally:
                self._processing = False

    # ------------------------------------------------------------------
    # Turn internals
    # ------------------------------------------------------------------

    def _seed_items_if_needed(self):
        if self.item_store.items():
            return
        for name in ("Potion", "Knife", "Rope"):
            self.item_store.insert(name)
        logger.info("Seeded starter inventory")

    def _append(self, result: TurnResult, message: Message) -> Message:
        self._messages.append(message)
        result.messages.append(message)
        return message

    async def _run_turn(self, trimmed: str) -> TurnResult:
        result = TurnResult()
        user_message = self._append(result, Message(role=Role.USER, text=trimmed))

        if self._mode == GameplayMode.SPELLING_CHECK:
            checked = analyze(user_message.text, self.inventory_names(), self.dictionary)
            user_message.text = checked.corrected_text
            user_message.segments = checked.segments
            user_message.remaining_allowance = checked.remaining_allowance

            penalty = spelling_penalty(checked.remaining_allowance)
            if penalty:
                result.damage_taken = self.health.apply_damage(penalty)
                logger.warning(
                    f"Spelling penalty: allowance={checked.remaining_allowance}, -{penalty} HP "
                    f"(now {self.health.current}/{self.health.total})"
                )
                self._append(result, Message(
                    role=Role.STORY,
                    text=penalty_message(checked.remaining_allowance, penalty),
                ))
                result.generation_skipped = True
                return result

        spoken = user_message.text
        if self._mode == GameplayMode.DICE_ROLL:
            user_message.text = roll_and_annotate(spoken, self.rng)

        if self.privileged:
            self._append(result, Message(role=Role.STORY, text=PRIVILEGED_ADVISORY))
            result.generation_skipped = True
            return result

        action = user_message.text
        names = self.inventory_names()
        user_turns = sum(1 for m in self._messages if m.role == Role.USER)
        if user_turns == 1:
            history = [action]
        else:
            history = [m.text for m in self._messages]

        if self.turn_delay > 0:
            await asyncio.sleep(self.turn_delay)

        try:
            continuation = await self.storyteller.generate_continuation(
                action, history, names, fallback_action=spoken
            )
        except GenerationDisabledError as e:
            logger.error(f"Generation disabled: {e}")
            result.alert = str(e) or DISABLED_ALERT
            return result

        for name in continuation.awarded_items:
            self.item_store.insert(name)
        if continuation.awarded_gold > 0:
            self.gold.add(continuation.awarded_gold)
        result.awarded_items = list(continuation.awarded_items)
        result.awarded_gold = continuation.awarded_gold

        story_text = sanitize_story_text(continuation.text) or continuation.text.strip()
        self._append(result, Message(role=Role.STORY, text=story_text))
        return result
