"""
Mode policy registry.

Every interaction mode the UI exposes maps to exactly one immutable
:class:`ModePolicy`. The registry validates coverage when it is built, so a
mode without a policy is a startup error rather than a silent fallback:

.. code-block:: python

    registry = default_registry()
    policy = registry.get("translate")
    policy.uses_history   # False: every translation is a fresh single turn
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType

from . import prompts
from .config import DEFAULT_REASONING_BUDGET
from .exceptions import UnknownModeError

logger = logging.getLogger("baso")

__all__ = [
    "Mode",
    "ModePolicy",
    "ModeRegistry",
    "ModelTier",
    "Suggestion",
    "build_registry",
    "default_registry",
]


class Mode(str, Enum):
    CHAT = "chat"
    TRANSLATE = "translate"
    WRITER = "writer"
    AUTOCOMPLETE = "autocomplete"
    GRAMMAR = "grammar"
    KNOWLEDGE = "knowledge"
    VISION = "vision"
    ETIQUETTE = "etiquette"


class ModelTier(str, Enum):
    """Model tier selector; the transport resolves a tier to a model name."""

    PRO = "pro"
    FLASH = "flash"


@dataclass(frozen=True)
class Suggestion:
    """A starter prompt the UI can quick-submit."""

    label: str
    prompt: str
    context_tag: str | None = None


@dataclass(frozen=True)
class ModePolicy:
    mode: Mode
    model_tier: ModelTier
    template: str
    uses_history: bool
    accepts_attachment: bool = False
    reasoning_budget: int | None = None
    default_context_tag: str | None = None
    suggestions: tuple[Suggestion, ...] = ()


class ModeRegistry:
    """Read-only lookup from :class:`Mode` to :class:`ModePolicy`."""

    def __init__(self, policies: Mapping[Mode, ModePolicy]):
        missing = [mode for mode in Mode if mode not in policies]
        if missing:
            logger.error("[Baso] Mode registry is missing policies for %s", missing)
            raise UnknownModeError(missing[0])
        for mode, policy in policies.items():
            if policy.mode is not mode:
                raise ValueError(f"Policy for {mode.value!r} is declared for {policy.mode.value!r}")
        self._policies: Mapping[Mode, ModePolicy] = MappingProxyType(dict(policies))

    def get(self, mode: Mode | str) -> ModePolicy:
        """Return the policy for *mode*, raising :class:`UnknownModeError` if none exists."""
        try:
            key = Mode(mode)
        except ValueError:
            raise UnknownModeError(mode) from None
        return self._policies[key]

    def __contains__(self, mode: object) -> bool:
        try:
            return Mode(mode) in self._policies
        except ValueError:
            return False

    def __iter__(self):
        return iter(self._policies.values())

    def __len__(self) -> int:
        return len(self._policies)


_CHAT_SUGGESTIONS = (
    Suggestion(
        label="Saya Ingin Belajar",
        prompt=(
            "Halo Baso, saya ingin belajar Bahasa Minang dari dasar. "
            "Tolong ajarkan kata-kata sapaan sehari-hari."
        ),
        context_tag="beginner",
    ),
    Suggestion(
        label="Urang Awak (Native)",
        prompt="Assalamualaikum Sanak! Baa kaba? Ota lamak wak lah.",
        context_tag="native",
    ),
)

_WRITER_SUGGESTIONS = (
    Suggestion(label="Pantun", prompt="Buatkan pantun Minang tentang..."),
    Suggestion(label="Cerpen", prompt="Tuliskan cerpen pendek berbahasa Minang dengan tema..."),
    Suggestion(label="Pidato Adat", prompt="Buatkan naskah pidato adat (Pasambahan) untuk acara..."),
    Suggestion(label="Surat", prompt="Buatkan surat resmi dalam bahasa Minang untuk..."),
)

_KNOWLEDGE_SUGGESTIONS = (
    Suggestion(label="Sejarah", prompt="Ceritakan sejarah kerajaan Pagaruyung ringkas..."),
    Suggestion(label="Kuliner", prompt="Jelaskan filosofi di balik masakan Rendang..."),
    Suggestion(label="Adat", prompt="Jelaskan sistem matrilineal di Minangkabau..."),
    Suggestion(label="Tokoh", prompt="Siapa saja tokoh pahlawan nasional dari Minangkabau?"),
)


def _builtin_policies(reasoning_budget: int) -> dict[Mode, ModePolicy]:
    return {
        Mode.CHAT: ModePolicy(
            mode=Mode.CHAT,
            model_tier=ModelTier.PRO,
            template=prompts.CHAT_TEMPLATE,
            uses_history=True,
            accepts_attachment=True,
            suggestions=_CHAT_SUGGESTIONS,
        ),
        Mode.WRITER: ModePolicy(
            mode=Mode.WRITER,
            model_tier=ModelTier.PRO,
            template=prompts.WRITER_TEMPLATE,
            uses_history=True,
            accepts_attachment=True,
            reasoning_budget=reasoning_budget,
            suggestions=_WRITER_SUGGESTIONS,
        ),
        Mode.KNOWLEDGE: ModePolicy(
            mode=Mode.KNOWLEDGE,
            model_tier=ModelTier.PRO,
            template=prompts.KNOWLEDGE_TEMPLATE,
            uses_history=True,
            accepts_attachment=True,
            reasoning_budget=reasoning_budget,
            suggestions=_KNOWLEDGE_SUGGESTIONS,
        ),
        Mode.VISION: ModePolicy(
            mode=Mode.VISION,
            model_tier=ModelTier.PRO,
            template=prompts.VISION_TEMPLATE,
            uses_history=True,
            accepts_attachment=True,
            reasoning_budget=reasoning_budget,
        ),
        Mode.TRANSLATE: ModePolicy(
            mode=Mode.TRANSLATE,
            model_tier=ModelTier.FLASH,
            template=prompts.TRANSLATE_TEMPLATE,
            uses_history=False,
        ),
        Mode.GRAMMAR: ModePolicy(
            mode=Mode.GRAMMAR,
            model_tier=ModelTier.FLASH,
            template=prompts.GRAMMAR_TEMPLATE,
            uses_history=False,
        ),
        Mode.AUTOCOMPLETE: ModePolicy(
            mode=Mode.AUTOCOMPLETE,
            model_tier=ModelTier.FLASH,
            template=prompts.AUTOCOMPLETE_TEMPLATE,
            uses_history=False,
        ),
        Mode.ETIQUETTE: ModePolicy(
            mode=Mode.ETIQUETTE,
            model_tier=ModelTier.FLASH,
            template=prompts.ETIQUETTE_TEMPLATE,
            uses_history=False,
            default_context_tag="Umum",
        ),
    }


def build_registry(reasoning_budget: int = DEFAULT_REASONING_BUDGET) -> ModeRegistry:
    """Build a registry of the built-in policies with the given thinking budget."""
    return ModeRegistry(_builtin_policies(reasoning_budget))


@lru_cache(maxsize=1)
def default_registry() -> ModeRegistry:
    """Return the process-wide registry of built-in policies."""
    return build_registry()
