"""
Story Engine — Console Entry Point

Wires the engine together from environment settings and runs a plain
terminal loop. The loop is only a caller: everything it shows comes from
StorySession's messages and TurnResults.

To run: python -m orchestration.main
   or:  story-engine   (console script)

Commands:  /mode spelling | /mode dice   /reset   /inventory   /quit
"""

import os
import asyncio
import logging

from agents.generation_backend import build_gemini_backend
from agents.storyteller import StorytellerAgent
from models.gameplay import GameplayMode
from models.messages import Message, Role
from pipeline.session import StorySession
from tools.environment import is_privileged_process
from tools.item_store import JsonItemStore
from tools.settings import EngineSettings
from tools.spelling_dictionary import WordListDictionary

logger = logging.getLogger("StoryEngine")

_MODE_ALIASES = {
    "spelling": GameplayMode.SPELLING_CHECK,
    "dice": GameplayMode.DICE_ROLL,
}


def log_handlers(log_dir: str):
    """Everything goes to the log file; the terminal shows warnings and above."""
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    return [
        logging.FileHandler(os.path.join(log_dir, "story_engine.log"), encoding="utf-8"),
        console,
    ]


def configure_logging(log_dir: str):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=log_handlers(log_dir),
    )


def build_session(settings: EngineSettings) -> StorySession:
    """Construct a StorySession with the providers named in `settings`."""
    privileged = is_privileged_process()
    storyteller = StorytellerAgent(
        build_gemini_backend(settings),
        temperature=settings.temperature,
        privileged=privileged,
    )

    if os.path.exists(settings.wordlist_path):
        dictionary = WordListDictionary.from_file(settings.wordlist_path)
    else:
        logger.warning(f"Word list not found at {settings.wordlist_path}; spell checking accepts every word")
        dictionary = WordListDictionary([])

    return StorySession(
        item_store=JsonItemStore(settings.inventory_file),
        dictionary=dictionary,
        storyteller=storyteller,
        privileged=privileged,
        turn_delay=settings.turn_delay_seconds,
    )


def format_message(message: Message) -> str:
    if message.role == Role.USER:
        # Corrections are shown in *asterisks*
        body = "".join(
            f"*{s.text}*" if s.corrected else s.text for s in (message.segments or [])
        ) or message.text
        if message.remaining_allowance is not None:
            body += f"  [{message.remaining_allowance}/5]"
        return f"> {body}"
    return message.text


async def _loop(session: StorySession):
    advisory = session.startup_advisory()
    if advisory:
        print(f"! {advisory}")
    for message in session.messages:
        print(format_message(message))

    while True:
        status = f"HP {session.health.current}/{session.health.total} | Gold {session.gold.coins}"
        try:
            line = await asyncio.to_thread(input, f"\n[{status}] ")
        except EOFError:
            return
        command = line.strip()

        if command == "/quit":
            return
        if command == "/reset":
            session.reset_session()
            for message in session.messages:
                print(format_message(message))
            continue
        if command == "/inventory":
            print(", ".join(session.inventory_names()) or "(empty)")
            continue
        if command.startswith("/mode"):
            choice = command[len("/mode"):].strip().lower()
            if choice in _MODE_ALIASES:
                session.set_gameplay_mode(_MODE_ALIASES[choice])
                print(f"Mode: {session.gameplay_mode.value}")
            else:
                print("Usage: /mode spelling | /mode dice")
            continue

        result = await session.send_action(command)
        for message in result.messages:
            if message.role == Role.USER:
                print(format_message(message))
            else:
                print(f"\n{format_message(message)}")
        if result.alert:
            print(f"! {result.alert}")
        if result.awarded_items:
            print(f"+ Items: {', '.join(result.awarded_items)}")
        if result.awarded_gold:
            print(f"+ Gold: {result.awarded_gold}")


def run():
    settings = EngineSettings.from_env()
    configure_logging(settings.log_dir)
    session = build_session(settings)
    logger.info("Story engine started.")
    try:
        asyncio.run(_loop(session))
    except KeyboardInterrupt:
        pass
    logger.info("Story engine stopped.")


if __name__ == "__main__":
    run()
