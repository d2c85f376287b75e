"""
EngineSettings — Environment-driven configuration.

Values come from the process environment (optionally seeded from a .env
file via python-dotenv). A malformed value falls back to its default with
a warning rather than stopping the engine.
"""

import os
import logging
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger("Settings")


class EngineSettings(BaseModel):
    gemini_api_key: Optional[str] = None
    model_id: str = "gemini-2.0-flash"
    temperature: float = Field(default=0.9, ge=0.0, le=2.0)
    turn_delay_seconds: float = Field(default=1.0, ge=0.0)
    wordlist_path: str = "/usr/share/dict/words"
    inventory_file: str = "inventory.json"
    log_dir: str = "logs"

    model_config = {"protected_namespaces": ()}

    @field_validator("gemini_api_key")
    @classmethod
    def blank_key_is_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "EngineSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (tests).
            dotenv: Load a .env file first. Ignored when `environ` is given.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        env_map = {
            "gemini_api_key": "GEMINI_API_KEY",
            "model_id": "STORY_MODEL_ID",
            "temperature": "STORY_TEMPERATURE",
            "turn_delay_seconds": "TURN_DELAY_SECONDS",
            "wordlist_path": "SPELLCHECK_WORDLIST",
            "inventory_file": "INVENTORY_FILE",
            "log_dir": "LOG_DIR",
        }

        values = {}
        for field_name, env_name in env_map.items():
            raw = environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                cls.model_validate({field_name: raw})
            except ValidationError as e:
                logger.warning(f"Ignoring invalid {env_name}={raw!r}: {e.errors()[0]['msg']}")
                continue
            values[field_name] = raw

        return cls.model_validate(values)
