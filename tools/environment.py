"""
Execution-context checks.

Story generation is refused when the process runs with elevated privileges.
"""

import logging
import os

logger = logging.getLogger("Environment")


def is_privileged_process() -> bool:
    """True when running as root. Always False where effective UIDs don't exist."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    privileged = geteuid() == 0
    if privileged:
        logger.warning("Running as root; story generation is disabled for this process.")
    return privileged
