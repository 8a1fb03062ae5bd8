"""
Prompt assembly: mode policy + conversation history -> :class:`ModelRequest`.

Assembly is pure. The same inputs always produce the same request, which keeps
the transport boundary easy to stub in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from . import prompts
from .conversation import Attachment, Turn
from .exceptions import EmptyInputError, UnsupportedAttachmentError
from .modes import Mode, ModelTier, ModePolicy, ModeRegistry, default_registry

__all__ = ["ModelRequest", "PromptAssembler", "build_instruction"]


@dataclass(frozen=True)
class ModelRequest:
    """Everything the transport needs for one call."""

    mode: Mode
    instruction: str
    current_input: str
    model_tier: ModelTier
    prior_turns: tuple[Turn, ...] = ()
    attachment: Attachment | None = None
    reasoning_budget: int | None = None
    multi_turn: bool = False


def build_instruction(
    policy: ModePolicy,
    *,
    context_tag: str | None = None,
    language_preference: str | None = None,
) -> str:
    """Compose persona preamble, mode template and optional directives."""
    tag = context_tag or policy.default_context_tag or ""
    sections = [prompts.PERSONA_PREAMBLE, policy.template.format(context_tag=tag)]

    # Immersion levels only make sense for conversational modes.
    if policy.uses_history and context_tag in prompts.IMMERSION_DIRECTIVES:
        sections.append(prompts.IMMERSION_DIRECTIVES[context_tag])
    if language_preference in prompts.LANGUAGE_DIRECTIVES:
        sections.append(prompts.LANGUAGE_DIRECTIVES[language_preference])
    return "\n\n".join(sections)


class PromptAssembler:
    def __init__(self, registry: ModeRegistry | None = None):
        self.registry = registry if registry is not None else default_registry()

    def assemble(
        self,
        mode: Mode | str,
        current_input: str,
        *,
        history: Iterable[Turn] = (),
        attachment: Attachment | None = None,
        context_tag: str | None = None,
        language_preference: str | None = None,
    ) -> ModelRequest:
        """Build the request for one submission.

        Args:
            mode: Interaction mode; unknown modes raise ``UnknownModeError``.
            current_input: The user's text for this turn.
            history: Prior turns, excluding the message being submitted.
            attachment: Optional inline image.
            context_tag: Audience or immersion qualifier for this call.
            language_preference: Locale hint (``id``, ``en`` or ``min``).

        Returns:
            ModelRequest: The request, with ``prior_turns`` emptied for
            stateless modes.
        """
        policy = self.registry.get(mode)
        if not current_input.strip() and attachment is None:
            raise EmptyInputError("Message content cannot be empty.")
        if attachment is not None and not policy.accepts_attachment:
            raise UnsupportedAttachmentError(
                f"Mode {policy.mode.value!r} does not accept image attachments."
            )

        return ModelRequest(
            mode=policy.mode,
            instruction=build_instruction(
                policy,
                context_tag=context_tag,
                language_preference=language_preference,
            ),
            current_input=current_input,
            model_tier=policy.model_tier,
            prior_turns=tuple(history) if policy.uses_history else (),
            attachment=attachment,
            reasoning_budget=policy.reasoning_budget,
            multi_turn=policy.uses_history,
        )
