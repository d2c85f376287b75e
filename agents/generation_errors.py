"""
Generation Error Types — Structured exception hierarchy.

Lets the storyteller tell apart failures it should paper over with a
fallback line (backend down, unsupported) from the one the player must act
on (the capability is switched off).
"""


class GenerationError(Exception):
    """Base class for all generation backend errors. Recovered with a fallback."""
    pass


class GenerationUnavailableError(GenerationError):
    """No backend on this platform/install, or it is not configured. Recovered with a fallback."""
    pass


class GenerationDisabledError(GenerationError):
    """Backend exists but is turned off. NOT recovered: the player has to enable it."""
    pass


class PrivilegedContextError(GenerationError):
    """Generation was requested from an elevated-privilege process. Never attempted."""
    pass
