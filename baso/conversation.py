"""
Conversation history store.

A :class:`Conversation` is the ordered, mutable message list owned by one
session controller. Observers never see it directly; they receive immutable
:class:`ConversationSnapshot` copies.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum

from .modes import Mode

__all__ = [
    "Attachment",
    "Conversation",
    "ConversationSnapshot",
    "Message",
    "MessageStatus",
    "Role",
    "SessionState",
    "Turn",
    "new_message_id",
]

_id_counter = itertools.count()


def new_message_id() -> str:
    """Return a unique id ordered by creation time."""
    return f"{time.time_ns()}-{next(_id_counter)}"


def utc_now() -> datetime:
    return datetime.now(UTC)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class SessionState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    STREAMING = "streaming"


@dataclass(frozen=True)
class Attachment:
    """Inline image sent alongside a user message."""

    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("attachment data must not be empty")
        if not self.mime_type.startswith("image/"):
            raise ValueError(f"unsupported attachment type: {self.mime_type!r}")

    def __repr__(self) -> str:
        return f"Attachment(mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class Turn:
    """A prior message flattened to its role and final text."""

    role: Role
    text: str


@dataclass
class Message:
    role: Role
    content: str = ""
    status: MessageStatus = MessageStatus.PENDING
    attachment: Attachment | None = None
    id: str = field(default_factory=new_message_id)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def user(cls, content: str, attachment: Attachment | None = None) -> Message:
        return cls(
            role=Role.USER,
            content=content,
            status=MessageStatus.COMPLETE,
            attachment=attachment,
        )

    @classmethod
    def assistant_placeholder(cls) -> Message:
        return cls(role=Role.ASSISTANT)

    @property
    def is_in_flight(self) -> bool:
        return self.status in (MessageStatus.PENDING, MessageStatus.STREAMING)


@dataclass(frozen=True)
class ConversationSnapshot:
    """Immutable view of a conversation published to observers."""

    mode: Mode
    state: SessionState
    messages: tuple[Message, ...]
    context_tag: str | None = None
    language_preference: str | None = None

    @property
    def pending(self) -> Message | None:
        for message in reversed(self.messages):
            if message.is_in_flight:
                return message
        return None


class Conversation:
    """Ordered message list for a single mode."""

    def __init__(
        self,
        mode: Mode,
        *,
        context_tag: str | None = None,
        language_preference: str | None = None,
    ):
        self.mode = mode
        self.context_tag = context_tag
        self.language_preference = language_preference
        self._messages: list[Message] = []

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, message: Message) -> Message:
        if message.is_in_flight and self.pending() is not None:
            raise RuntimeError("conversation already has an in-flight message")
        self._messages.append(message)
        return message

    def get(self, message_id: str) -> Message | None:
        for message in reversed(self._messages):
            if message.id == message_id:
                return message
        return None

    def pending(self) -> Message | None:
        """Return the single pending or streaming message, if any."""
        for message in reversed(self._messages):
            if message.is_in_flight:
                return message
        return None

    def history(self) -> tuple[Turn, ...]:
        """Project completed messages into prior turns.

        Failed and pending messages are never replayed. Attachments are dropped
        but the turn is kept, so an image-only message projects to empty text.
        """
        return tuple(_project(self._messages))

    def snapshot(self, state: SessionState) -> ConversationSnapshot:
        return ConversationSnapshot(
            mode=self.mode,
            state=state,
            messages=tuple(replace(message) for message in self._messages),
            context_tag=self.context_tag,
            language_preference=self.language_preference,
        )


def _project(messages: Iterable[Message]) -> Iterable[Turn]:
    for message in messages:
        if message.status is not MessageStatus.COMPLETE:
            continue
        yield Turn(role=message.role, text=message.content)
