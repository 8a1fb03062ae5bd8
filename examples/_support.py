"""
Shared support helpers for runnable examples.

Builds a session controller from the environment and turns missing
credentials into a readable setup message.
"""

from __future__ import annotations

from baso import ConfigurationError, Mode, SessionController, open_session

__all__ = ["ConfigurationError", "require_session"]


def require_session(mode: Mode, *, language_preference: str | None = None) -> SessionController:
    """Open a Gemini-backed session, raising ``ConfigurationError`` when setup is incomplete."""
    return open_session(mode, language_preference=language_preference)
