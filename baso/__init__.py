"""
Baso public API.

A streaming session controller for a Minangkabau language assistant backed by
Gemini: mode policies, prompt assembly, a pluggable transport and the
single-flight controller that folds streamed fragments into a conversation.
"""

from __future__ import annotations

from .autocomplete import AutocompleteSession, join_suggestion, open_autocomplete
from .config import Settings, get_settings
from .controller import SessionController, open_session
from .conversation import (
    Attachment,
    ConversationSnapshot,
    Message,
    MessageStatus,
    Role,
    SessionState,
    Turn,
)
from .exceptions import (
    BasoError,
    ConfigurationError,
    EmptyInputError,
    EmptyResponseError,
    TransportFailure,
    UnknownModeError,
    UnsupportedAttachmentError,
)
from .modes import Mode, ModelTier, ModePolicy, ModeRegistry, Suggestion, default_registry
from .prompting import ModelRequest, PromptAssembler
from .protocols import TransportProtocol
from .transport import GeminiTransport, create_transport

__all__ = [
    "Attachment",
    "AutocompleteSession",
    "BasoError",
    "ConfigurationError",
    "ConversationSnapshot",
    "EmptyInputError",
    "EmptyResponseError",
    "GeminiTransport",
    "Message",
    "MessageStatus",
    "Mode",
    "ModePolicy",
    "ModeRegistry",
    "ModelRequest",
    "ModelTier",
    "PromptAssembler",
    "Role",
    "SessionController",
    "SessionState",
    "Settings",
    "Suggestion",
    "TransportFailure",
    "TransportProtocol",
    "Turn",
    "UnknownModeError",
    "UnsupportedAttachmentError",
    "create_transport",
    "default_registry",
    "get_settings",
    "join_suggestion",
    "open_autocomplete",
    "open_session",
]
