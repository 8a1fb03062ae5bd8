"""
Debounced "complete while typing" session.

Autocomplete is a degenerate conversation: always stateless, at most one
request in flight, and a new keystroke supersedes whatever is pending. Input
is only sent once typing pauses for ``quiet_seconds``; the reply is collected
in full before it is published as the suggestion.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .config import (
    DEFAULT_AUTOCOMPLETE_MIN_CHARS,
    DEFAULT_AUTOCOMPLETE_QUIET_SECONDS,
    Settings,
    get_settings,
)
from .modes import Mode
from .prompting import PromptAssembler
from .protocols import TransportProtocol, aclose_stream

logger = logging.getLogger("baso")

__all__ = ["AutocompleteSession", "join_suggestion", "open_autocomplete"]


def join_suggestion(text: str, suggestion: str) -> str:
    """Append a cleaned suggestion to *text*, adding a space when needed."""
    clean = suggestion.strip().removeprefix(".").removesuffix(".")
    if not clean:
        return text
    separator = "" if text.endswith(" ") else " "
    return text + separator + clean


class AutocompleteSession:
    def __init__(
        self,
        transport: TransportProtocol,
        *,
        assembler: PromptAssembler | None = None,
        quiet_seconds: float = DEFAULT_AUTOCOMPLETE_QUIET_SECONDS,
        min_chars: int = DEFAULT_AUTOCOMPLETE_MIN_CHARS,
        language_preference: str | None = None,
        on_suggestion: Callable[[str], None] | None = None,
    ):
        if quiet_seconds < 0:
            raise ValueError("quiet_seconds must be >= 0")
        self.transport = transport
        self.assembler = assembler if assembler is not None else PromptAssembler()
        self.quiet_seconds = quiet_seconds
        self.min_chars = min_chars
        self.language_preference = language_preference
        self.on_suggestion = on_suggestion
        self.suggestion = ""
        self.is_loading = False
        self._task: asyncio.Task | None = None

    def update(self, text: str) -> None:
        """Record new editor text, superseding any pending request.

        Must be called from inside a running event loop.
        """
        self._cancel_pending()
        self._set_suggestion("")
        if not text.strip() or len(text) < self.min_chars:
            return
        self._task = asyncio.get_running_loop().create_task(self._complete_after_quiet(text))

    def accept(self, text: str) -> str:
        """Return *text* with the current suggestion applied, then clear it."""
        if not self.suggestion:
            return text
        combined = join_suggestion(text, self.suggestion)
        self._set_suggestion("")
        return combined

    async def settle(self) -> None:
        """Wait for the pending request, if any, to finish."""
        task = self._task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def aclose(self) -> None:
        task = self._task
        self._cancel_pending()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _cancel_pending(self) -> None:
        task = self._task
        self._task = None
        self.is_loading = False
        if task is not None and not task.done():
            task.cancel()

    def _set_suggestion(self, suggestion: str) -> None:
        if suggestion == self.suggestion:
            return
        self.suggestion = suggestion
        if self.on_suggestion is None:
            return
        try:
            self.on_suggestion(suggestion)
        except Exception:
            logger.exception("[Baso] Suggestion callback %r raised", self.on_suggestion)

    async def _complete_after_quiet(self, text: str) -> None:
        await asyncio.sleep(self.quiet_seconds)

        request = self.assembler.assemble(
            Mode.AUTOCOMPLETE,
            text,
            language_preference=self.language_preference,
        )
        self.is_loading = True
        fragments: list[str] = []
        stream = self.transport.stream(request)
        try:
            async for fragment in stream:
                fragments.append(fragment)
        except Exception as e:
            logger.warning(f"[Baso] Autocomplete request failed: {e}")
            return
        finally:
            self.is_loading = False
            await aclose_stream(stream)

        suggestion = "".join(fragments).strip()
        if not suggestion:
            logger.debug("[Baso] Autocomplete returned no suggestion")
        self._set_suggestion(suggestion)


def open_autocomplete(
    *,
    settings: Settings | None = None,
    transport: TransportProtocol | None = None,
    language_preference: str | None = None,
    on_suggestion: Callable[[str], None] | None = None,
) -> AutocompleteSession:
    """Build an autocomplete session whose quiet window and threshold come from settings."""
    settings = settings if settings is not None else get_settings()
    if transport is None:
        from .transport import create_transport

        transport = create_transport(settings)
    return AutocompleteSession(
        transport,
        quiet_seconds=settings.autocomplete_quiet_seconds,
        min_chars=settings.autocomplete_min_chars,
        language_preference=language_preference,
        on_suggestion=on_suggestion,
    )
