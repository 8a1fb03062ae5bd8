"""
Shared fixtures and stub factories for the Baso test suite.

No test talks to the real Gemini service. Controllers are driven by
``StubTransport`` (scripted fragments, optional failure, optional gate that
holds the stream open), and the Gemini adapter is exercised against a
``MagicMock`` client whose async methods are ``AsyncMock`` objects.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from baso.conversation import Attachment
from baso.exceptions import TransportFailure
from baso.modes import Mode
from baso.prompting import PromptAssembler

# A 1x1 transparent PNG.
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01"
    b"\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


# ---------------------------------------------------------------------------
# Stub transport
# ---------------------------------------------------------------------------


class StubTransport:
    """Scripted transport that records every request it receives.

    Args:
        fragments: Fragments yielded for every call.
        fail_after: If set, raise ``TransportFailure`` after yielding this many
            fragments.
        gate: If set, the stream waits on this event before yielding each
            fragment, so tests can observe in-flight state.
    """

    def __init__(self, fragments=(), fail_after=None, gate=None, error=None):
        self.fragments = list(fragments)
        self.fail_after = fail_after
        self.gate = gate
        self.error = error or TransportFailure("network unreachable")
        self.requests = []
        self.closed = 0

    async def stream(self, request):
        self.requests.append(request)
        try:
            for index, fragment in enumerate(self.fragments):
                if self.fail_after is not None and index >= self.fail_after:
                    raise self.error
                if self.gate is not None:
                    await self.gate.wait()
                yield fragment
            if self.fail_after is not None and self.fail_after >= len(self.fragments):
                raise self.error
        finally:
            self.closed += 1

    @property
    def last_request(self):
        return self.requests[-1]


class SteppedTransport:
    """Transport whose fragments are pushed one at a time by the test."""

    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()
        self.requests = []

    async def stream(self, request):
        self.requests.append(request)
        while True:
            item = await self.queue.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    def push(self, *items):
        for item in items:
            self.queue.put_nowait(item)


async def drain_loop(turns: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(turns):
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Gemini SDK mocks
# ---------------------------------------------------------------------------


def make_chunk(text):
    chunk = MagicMock()
    chunk.text = text
    return chunk


async def _async_iter(items):
    for item in items:
        yield item


def make_mock_genai_client(texts=(), error=None):
    """
    Create a mock ``genai.Client`` whose streaming calls yield *texts*.

    Args:
        texts: Chunk texts returned by both call shapes.
        error: If given, both streaming calls raise it instead.
    """
    client = MagicMock()
    chat = MagicMock()

    def _stream(*args, **kwargs):
        return _async_iter([make_chunk(text) for text in texts])

    if error is not None:
        client.aio.models.generate_content_stream = AsyncMock(side_effect=error)
        chat.send_message_stream = AsyncMock(side_effect=error)
    else:
        client.aio.models.generate_content_stream = AsyncMock(side_effect=_stream)
        chat.send_message_stream = AsyncMock(side_effect=_stream)
    client.aio.chats.create = MagicMock(return_value=chat)
    return client, chat


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def assembler():
    return PromptAssembler()


@pytest.fixture
def image():
    return Attachment(data=PNG_BYTES, mime_type="image/png")


@pytest.fixture
def translate_transport():
    """Transport scripted with the translation scenario fragments."""
    return StubTransport(["Tarimo", " kasih", " sangaik"])


@pytest.fixture(params=list(Mode), ids=lambda mode: mode.value)
def every_mode(request):
    return request.param
