"""
Streaming session controller.

One :class:`SessionController` owns one conversation and drives at most one
in-flight request at a time (the idle gate). A submission appends a user
message and a pending assistant placeholder, assembles a request, and folds
the transport's fragments into the placeholder as they arrive. Observers get a
:class:`~baso.conversation.ConversationSnapshot` after every transition.

Usage:
    controller = open_session(Mode.TRANSLATE)
    controller.subscribe(render)
    await controller.submit("Terima kasih banyak")

State machine::

    idle -> dispatching -> streaming -> idle
                 \\-----------------------/  (empty response / failure)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from .config import Settings, get_settings
from .conversation import (
    Attachment,
    Conversation,
    ConversationSnapshot,
    Message,
    MessageStatus,
    SessionState,
)
from .exceptions import EmptyInputError, EmptyResponseError, UnsupportedAttachmentError
from .modes import Mode, Suggestion, build_registry
from .prompting import ModelRequest, PromptAssembler
from .prompts import failure_message
from .protocols import TransportProtocol, aclose_stream

logger = logging.getLogger("baso")

__all__ = ["Observer", "SessionController", "open_session"]

Observer = Callable[[ConversationSnapshot], None]


@dataclass
class _InFlight:
    target_id: str
    task: asyncio.Task


class SessionController:
    """Single-flight streaming controller for one conversation."""

    def __init__(
        self,
        transport: TransportProtocol,
        *,
        mode: Mode | str = Mode.CHAT,
        assembler: PromptAssembler | None = None,
        context_tag: str | None = None,
        language_preference: str | None = None,
    ):
        self.transport = transport
        self.assembler = assembler if assembler is not None else PromptAssembler()
        policy = self.assembler.registry.get(mode)
        self._conversation = Conversation(
            policy.mode,
            context_tag=context_tag,
            language_preference=language_preference,
        )
        self._state = SessionState.IDLE
        self._inflight: _InFlight | None = None
        self._observers: list[Observer] = []

    # -----------------------------------------------------------------------
    # Read-only views
    # -----------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is SessionState.IDLE

    @property
    def mode(self) -> Mode:
        return self._conversation.mode

    @property
    def context_tag(self) -> str | None:
        return self._conversation.context_tag

    @property
    def language_preference(self) -> str | None:
        return self._conversation.language_preference

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._conversation.messages

    @property
    def suggestions(self) -> tuple[Suggestion, ...]:
        return self.assembler.registry.get(self.mode).suggestions

    def snapshot(self) -> ConversationSnapshot:
        return self._conversation.snapshot(self._state)

    # -----------------------------------------------------------------------
    # Observers
    # -----------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer* and return a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self) -> None:
        if not self._observers:
            return
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("[Baso] Observer %r raised while handling a snapshot", observer)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        self._publish()

    # -----------------------------------------------------------------------
    # UI entry points
    # -----------------------------------------------------------------------

    async def submit(self, text: str, attachment: Attachment | None = None) -> bool:
        """Submit user input and stream the assistant reply.

        Returns:
            bool: ``False`` when the submission was rejected (not idle, blank
            input without an attachment, or an attachment the mode does not
            accept). Rejections leave the conversation untouched.
        """
        return await self._submit(text, attachment, self._conversation.context_tag)

    async def submit_with_context(
        self,
        text: str,
        context_tag: str,
        attachment: Attachment | None = None,
    ) -> bool:
        """Submit with a context tag for this call only.

        The tag also becomes the conversation's tag if none was set yet.
        """
        return await self._submit(text, attachment, context_tag, adopt_tag=True)

    async def submit_suggestion(self, suggestion: Suggestion) -> bool:
        """Quick-submit a starter suggestion."""
        if suggestion.context_tag is None:
            return await self.submit(suggestion.prompt)
        return await self.submit_with_context(suggestion.prompt, suggestion.context_tag)

    def switch_mode(self, mode: Mode | str, *, context_tag: str | None = None) -> None:
        """Discard the conversation and start an empty one in *mode*.

        Any in-flight request is abandoned; its late fragments are dropped.
        """
        policy = self.assembler.registry.get(mode)
        self._abandon_inflight()
        self._conversation = Conversation(
            policy.mode,
            context_tag=context_tag,
            language_preference=self._conversation.language_preference,
        )
        logger.info("[Baso] Switched to %s mode", policy.mode.value)
        self._set_state(SessionState.IDLE)

    def set_language_preference(self, language_preference: str | None) -> None:
        self._conversation.language_preference = language_preference
        self._publish()

    def cancel(self) -> bool:
        """Stop the in-flight request, keeping any partial reply as failed."""
        inflight = self._inflight
        if inflight is None:
            return False
        target = self._conversation.get(inflight.target_id)
        self._abandon_inflight()
        if target is not None and target.is_in_flight:
            target.status = MessageStatus.FAILED
        logger.info("[Baso] Cancelled request for message %s", inflight.target_id)
        self._set_state(SessionState.IDLE)
        return True

    # -----------------------------------------------------------------------
    # Streaming
    # -----------------------------------------------------------------------

    async def _submit(
        self,
        text: str,
        attachment: Attachment | None,
        context_tag: str | None,
        *,
        adopt_tag: bool = False,
    ) -> bool:
        if not self.is_idle:
            logger.warning("[Baso] Submission rejected: a request is already in flight.")
            return False

        conversation = self._conversation
        try:
            request = self.assembler.assemble(
                conversation.mode,
                text,
                history=conversation.history(),
                attachment=attachment,
                context_tag=context_tag,
                language_preference=conversation.language_preference,
            )
        except (EmptyInputError, UnsupportedAttachmentError) as exc:
            logger.warning("[Baso] Submission rejected: %s", exc)
            return False

        if adopt_tag and conversation.context_tag is None:
            conversation.context_tag = context_tag
        conversation.append(Message.user(text, attachment))
        target = conversation.append(Message.assistant_placeholder())
        logger.info(
            "[Baso] Dispatching %s request (%d prior turns, attachment=%s)",
            request.mode.value,
            len(request.prior_turns),
            attachment is not None,
        )

        task = asyncio.ensure_future(self._pump(target, request))
        self._inflight = _InFlight(target_id=target.id, task=task)
        self._set_state(SessionState.DISPATCHING)
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                if self._is_current(target):
                    self._abandon_inflight()
                    target.status = MessageStatus.FAILED
                    self._set_state(SessionState.IDLE)
                raise
        return True

    def _is_current(self, target: Message) -> bool:
        return self._inflight is not None and self._inflight.target_id == target.id

    def _abandon_inflight(self) -> None:
        inflight = self._inflight
        self._inflight = None
        if inflight is not None and not inflight.task.done():
            inflight.task.cancel()

    async def _pump(self, target: Message, request: ModelRequest) -> None:
        received = 0
        stream: AsyncIterator[str] | None = None
        try:
            stream = self.transport.stream(request)
            async for fragment in stream:
                if not self._is_current(target):
                    logger.debug("[Baso] Dropping fragment for abandoned message %s", target.id)
                    return
                if not fragment:
                    continue
                received += 1
                if target.status is MessageStatus.PENDING:
                    target.status = MessageStatus.STREAMING
                    self._state = SessionState.STREAMING
                target.content += fragment
                self._publish()
        except Exception as exc:
            if self._is_current(target):
                self._fail(target, exc)
            return
        finally:
            if stream is not None:
                await aclose_stream(stream)

        if not self._is_current(target):
            return
        if received == 0:
            self._fail(target, EmptyResponseError(f"{request.mode.value} request returned no text"))
            return

        target.status = MessageStatus.COMPLETE
        self._inflight = None
        self._set_state(SessionState.IDLE)

    def _fail(self, target: Message, exc: Exception) -> None:
        if isinstance(exc, EmptyResponseError):
            logger.warning("[Baso] Empty response for message %s: %s", target.id, exc)
        else:
            logger.error(
                "[Baso] Transport failure for message %s: %s",
                target.id,
                exc,
                exc_info=exc,
            )
        target.content = failure_message(self._conversation.language_preference)
        target.status = MessageStatus.FAILED
        self._inflight = None
        self._set_state(SessionState.IDLE)


def open_session(
    mode: Mode | str = Mode.CHAT,
    *,
    settings: Settings | None = None,
    transport: TransportProtocol | None = None,
    language_preference: str | None = None,
) -> SessionController:
    """Build a controller wired to the Gemini transport from settings."""
    settings = settings if settings is not None else get_settings()
    if transport is None:
        from .transport import create_transport

        transport = create_transport(settings)
    return SessionController(
        transport,
        mode=mode,
        assembler=PromptAssembler(build_registry(settings.reasoning_budget)),
        language_preference=language_preference,
    )
