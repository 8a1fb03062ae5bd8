"""Tests for baso.prompting: request assembly."""

import pytest

from baso import prompts
from baso.conversation import Role, Turn
from baso.exceptions import EmptyInputError, UnknownModeError, UnsupportedAttachmentError
from baso.modes import Mode, ModelTier, default_registry
from baso.prompting import PromptAssembler, build_instruction

HISTORY = (
    Turn(Role.USER, "Baa kaba?"),
    Turn(Role.ASSISTANT, "Alhamdulillah, baik."),
)


class TestAssemble:
    def test_translate_request(self, assembler):
        request = assembler.assemble(Mode.TRANSLATE, "Terima kasih banyak", history=HISTORY)

        assert request.prior_turns == ()
        assert request.multi_turn is False
        assert request.model_tier is ModelTier.FLASH
        assert request.instruction.startswith(prompts.PERSONA_PREAMBLE)
        assert prompts.TRANSLATE_TEMPLATE in request.instruction
        assert request.current_input == "Terima kasih banyak"
        assert request.reasoning_budget is None

    def test_chat_request_keeps_history(self, assembler):
        request = assembler.assemble(Mode.CHAT, "Ota lamak", history=HISTORY)

        assert request.prior_turns == HISTORY
        assert request.multi_turn is True
        assert request.model_tier is ModelTier.PRO

    def test_history_accepts_any_iterable(self, assembler):
        request = assembler.assemble(Mode.KNOWLEDGE, "Pagaruyung", history=iter(HISTORY))
        assert request.prior_turns == HISTORY
        assert request.reasoning_budget == 2048

    def test_deterministic(self, assembler):
        kwargs = {"history": HISTORY, "context_tag": "native", "language_preference": "id"}
        assert assembler.assemble(Mode.CHAT, "x", **kwargs) == assembler.assemble(
            Mode.CHAT, "x", **kwargs
        )

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_without_attachment(self, assembler, every_mode, text):
        with pytest.raises(EmptyInputError):
            assembler.assemble(every_mode, text)

    def test_attachment_in_vision_mode(self, assembler, image):
        request = assembler.assemble(Mode.VISION, "", history=HISTORY, attachment=image)

        assert request.attachment is image
        assert request.prior_turns == HISTORY

    def test_attachment_in_stateless_mode_rejected(self, assembler, image):
        with pytest.raises(UnsupportedAttachmentError):
            assembler.assemble(Mode.GRAMMAR, "Ambo pai", attachment=image)

    def test_unknown_mode(self, assembler):
        with pytest.raises(UnknownModeError):
            assembler.assemble("generic", "halo")

    def test_mode_string_is_normalised(self, assembler):
        assert assembler.assemble("writer", "pantun").mode is Mode.WRITER


class TestBuildInstruction:
    def test_etiquette_interpolates_audience(self):
        policy = default_registry().get(Mode.ETIQUETTE)
        instruction = build_instruction(policy, context_tag="Mertua")
        assert "TARGET LAWAN BICARA: Mertua" in instruction

    def test_etiquette_default_audience(self):
        policy = default_registry().get(Mode.ETIQUETTE)
        assert "TARGET LAWAN BICARA: Umum" in build_instruction(policy)

    def test_immersion_directive_for_conversational_mode(self):
        policy = default_registry().get(Mode.CHAT)
        instruction = build_instruction(policy, context_tag="beginner")
        assert prompts.IMMERSION_DIRECTIVES["beginner"] in instruction
        assert prompts.IMMERSION_DIRECTIVES["native"] not in instruction

    def test_immersion_tag_ignored_for_stateless_mode(self):
        policy = default_registry().get(Mode.TRANSLATE)
        instruction = build_instruction(policy, context_tag="native")
        assert prompts.IMMERSION_DIRECTIVES["native"] not in instruction

    @pytest.mark.parametrize("language", ["id", "en", "min"])
    def test_language_directive(self, language):
        policy = default_registry().get(Mode.GRAMMAR)
        instruction = build_instruction(policy, language_preference=language)
        assert instruction.endswith(prompts.LANGUAGE_DIRECTIVES[language])

    def test_unknown_language_adds_nothing(self):
        policy = default_registry().get(Mode.GRAMMAR)
        assert build_instruction(policy, language_preference="fr") == build_instruction(policy)

    def test_every_template_formats(self, every_mode):
        policy = default_registry().get(every_mode)
        assert "{" not in build_instruction(policy, context_tag="tag")


def test_custom_registry_is_used():
    from baso.modes import build_registry

    assembler = PromptAssembler(build_registry(64))
    assert assembler.assemble(Mode.WRITER, "pantun").reasoning_budget == 64
