"""
Exception hierarchy and setup diagnostics for Baso.

Configuration problems (unknown modes, missing credentials) surface at startup.
Transport problems are recovered by the session controller and shown to the
user as a failed assistant message, never raised past it.
"""

from __future__ import annotations

from typing import NoReturn

__all__ = [
    "BasoError",
    "ConfigurationError",
    "EmptyInputError",
    "EmptyResponseError",
    "TransportFailure",
    "UnknownModeError",
    "UnsupportedAttachmentError",
    "raise_configuration_error",
    "troubleshooting_message",
]


class BasoError(RuntimeError):
    """Base class for every error raised by Baso."""


class ConfigurationError(BasoError):
    """Raised when the service credentials or settings are missing at startup."""


class UnknownModeError(BasoError):
    """Raised when a mode has no registered policy."""

    def __init__(self, mode: object) -> None:
        super().__init__(f"No policy registered for mode {mode!r}")
        self.mode = mode


class EmptyInputError(BasoError):
    """Raised when a submission has neither text nor an attachment."""


class UnsupportedAttachmentError(BasoError):
    """Raised when an image is attached in a mode that does not accept images."""


class TransportFailure(BasoError):
    """Raised when the remote model call cannot be completed."""


class EmptyResponseError(BasoError):
    """The remote model completed without producing any text."""


def troubleshooting_message(context: str, reason: str | None = None) -> str:
    """Build a standard setup troubleshooting message."""
    label = context.strip() if context.strip() else "baso"
    lines = [f"[{label}] Gemini service setup check failed."]
    if reason:
        lines.append(f"Reason: {reason}")
    lines.extend(
        [
            "",
            "Troubleshooting checklist:",
            "1. Create an API key in Google AI Studio.",
            "2. Export it: export GEMINI_API_KEY=...",
            "   (or add GEMINI_API_KEY=... to a .env file in the working directory)",
            "3. Install dependencies: pip install -e .",
            "4. Verify SDK import:",
            '   python -c "from google import genai; print(genai.Client)"',
        ]
    )
    return "\n".join(lines)


def raise_configuration_error(
    context: str,
    *,
    reason: str | None = None,
    exc: BaseException | None = None,
) -> NoReturn:
    """Raise :class:`ConfigurationError` with standardized diagnostics."""
    computed_reason = reason
    if computed_reason is None and exc is not None:
        computed_reason = f"{type(exc).__name__}: {exc}"

    error = ConfigurationError(troubleshooting_message(context, reason=computed_reason))
    if exc is not None:
        raise error from exc
    raise error
