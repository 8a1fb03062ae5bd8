"""
Gemini transport adapter.

Wraps the ``google-genai`` async client behind :class:`~baso.protocols.TransportProtocol`.
Two call shapes are supported uniformly:

- multi-turn: prior turns are replayed as chat history and the new input is
  sent with ``chats.create(...).send_message_stream``;
- single-turn: only the new input is sent with ``models.generate_content_stream``.

An image attachment travels as an extra content part in either shape.

Usage:
    from baso.transport import create_transport

    transport = create_transport()          # reads GEMINI_API_KEY once
    async for fragment in transport.stream(request):
        print(fragment, end="")
"""

from __future__ import annotations

import importlib
import logging
import time
from collections.abc import AsyncIterator
from functools import lru_cache
from typing import Any

from .config import DEFAULT_FLASH_MODEL, DEFAULT_PRO_MODEL, Settings, get_settings
from .conversation import Role
from .exceptions import TransportFailure, raise_configuration_error
from .modes import ModelTier
from .prompting import ModelRequest

logger = logging.getLogger("baso")

__all__ = ["GeminiTransport", "create_transport"]

# Gemini rejects empty text parts; image-only turns are replayed with this text.
EMPTY_TURN_TEXT = "[gambar]"


@lru_cache(maxsize=1)
def _import_genai() -> tuple[Any, Any]:
    """Import ``google.genai`` lazily so the core does not hard-require it."""
    return (
        importlib.import_module("google.genai"),
        importlib.import_module("google.genai.types"),
    )


class GeminiTransport:
    """Streams text fragments from Gemini for an assembled :class:`ModelRequest`."""

    def __init__(
        self,
        client: Any,
        *,
        pro_model: str = DEFAULT_PRO_MODEL,
        flash_model: str = DEFAULT_FLASH_MODEL,
        debug_timing: bool = False,
    ) -> None:
        self._client = client
        self._models = {ModelTier.PRO: pro_model, ModelTier.FLASH: flash_model}
        self.debug_timing = debug_timing

    def model_for(self, tier: ModelTier) -> str:
        return self._models[ModelTier(tier)]

    async def stream(self, request: ModelRequest) -> AsyncIterator[str]:
        _, types = _import_genai()
        model = self.model_for(request.model_tier)
        config = self._build_config(types, request)
        message = self._build_input(types, request)

        start_time = time.perf_counter()
        fragments = 0
        try:
            if request.multi_turn:
                chat = self._client.aio.chats.create(
                    model=model,
                    config=config,
                    history=self._build_history(types, request),
                )
                response_stream = await chat.send_message_stream(message)
            else:
                response_stream = await self._client.aio.models.generate_content_stream(
                    model=model,
                    contents=message,
                    config=config,
                )

            async for chunk in response_stream:
                text = getattr(chunk, "text", None)
                if not text:
                    continue
                fragments += 1
                yield text
        except TransportFailure:
            raise
        except Exception as exc:
            raise TransportFailure(f"Gemini request failed ({model}): {exc}") from exc

        if self.debug_timing:
            elapsed = time.perf_counter() - start_time
            logger.info(
                f"[Baso] {request.mode.value} stream from {model} finished in {elapsed:.3f}s "
                f"with {fragments} fragments."
            )

    @staticmethod
    def _build_config(types: Any, request: ModelRequest) -> Any:
        thinking_config = None
        if request.reasoning_budget is not None:
            thinking_config = types.ThinkingConfig(thinking_budget=request.reasoning_budget)
        return types.GenerateContentConfig(
            system_instruction=request.instruction,
            thinking_config=thinking_config,
        )

    @staticmethod
    def _build_input(types: Any, request: ModelRequest) -> Any:
        if request.attachment is None:
            return request.current_input

        parts = [
            types.Part.from_bytes(
                data=request.attachment.data,
                mime_type=request.attachment.mime_type,
            )
        ]
        if request.current_input.strip():
            parts.append(types.Part(text=request.current_input))
        return parts

    @staticmethod
    def _build_history(types: Any, request: ModelRequest) -> list[Any]:
        return [
            types.Content(
                role="model" if turn.role is Role.ASSISTANT else "user",
                parts=[types.Part(text=turn.text if turn.text.strip() else EMPTY_TURN_TEXT)],
            )
            for turn in request.prior_turns
        ]


def create_transport(settings: Settings | None = None, *, debug_timing: bool = False) -> GeminiTransport:
    """Build a :class:`GeminiTransport` from settings.

    Missing credentials are a startup error, never a per-call one.
    """
    settings = settings if settings is not None else get_settings()
    if not settings.gemini_api_key:
        raise_configuration_error(
            "baso.transport",
            reason="GEMINI_API_KEY is not configured.",
        )

    try:
        genai, _ = _import_genai()
    except ModuleNotFoundError as exc:
        raise_configuration_error("baso.transport", exc=exc)

    client = genai.Client(api_key=settings.gemini_api_key)
    logger.info(
        "[Baso] Gemini transport ready (pro=%s, flash=%s)",
        settings.pro_model,
        settings.flash_model,
    )
    return GeminiTransport(
        client,
        pro_model=settings.pro_model,
        flash_model=settings.flash_model,
        debug_timing=debug_timing,
    )
