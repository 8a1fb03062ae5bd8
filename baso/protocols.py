"""
Transport protocol for Baso.

Any object with a matching ``stream`` method can drive a session controller,
so tests and alternative providers plug in without touching the controller:

.. code-block:: python

    class CannedTransport:
        async def stream(self, request):
            for fragment in ("Tarimo", " kasih"):
                yield fragment

    controller = SessionController(CannedTransport(), mode=Mode.TRANSLATE)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from .prompting import ModelRequest

__all__ = ["TransportProtocol", "aclose_stream"]


@runtime_checkable
class TransportProtocol(Protocol):
    """Structural interface for a streaming model transport."""

    def stream(self, request: ModelRequest) -> AsyncIterator[str]:
        """Return a lazy, finite, non-restartable sequence of text fragments.

        Fragments are non-empty and arrive in order. An empty response yields
        nothing. Failures raise :class:`~baso.exceptions.TransportFailure`.
        """
        ...


async def aclose_stream(stream: AsyncIterator[str]) -> None:
    """Close *stream* if it supports ``aclose`` (async generators do)."""
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()
