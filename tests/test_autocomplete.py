"""Tests for baso.autocomplete: the debounced completion session."""

import asyncio
import logging

import pytest

from baso.autocomplete import AutocompleteSession, join_suggestion, open_autocomplete
from baso.config import Settings
from baso.modes import Mode

from .conftest import StubTransport


class TestJoinSuggestion:
    @pytest.mark.parametrize(
        ("text", "suggestion", "expected"),
        [
            ("Ambo pai ka", "pasa", "Ambo pai ka pasa"),
            ("Ambo pai ka ", "pasa", "Ambo pai ka pasa"),
            ("Baa kaba?", " Alah makan? ", "Baa kaba? Alah makan?"),
            ("Ambo pai", ".ka pasa.", "Ambo pai ka pasa"),
            ("Ambo pai", "  ", "Ambo pai"),
        ],
    )
    def test_join(self, text, suggestion, expected):
        assert join_suggestion(text, suggestion) == expected


class TestAutocompleteSession:
    @pytest.mark.asyncio
    async def test_short_input_clears_without_request(self):
        transport = StubTransport(["x"])
        session = AutocompleteSession(transport, quiet_seconds=0)

        session.update("Amb")
        session.update("     ")
        await session.settle()

        assert transport.requests == []
        assert session.suggestion == ""

    @pytest.mark.asyncio
    async def test_suggestion_after_quiet_window(self):
        transport = StubTransport(["ka ", "pasa"])
        seen = []
        session = AutocompleteSession(transport, quiet_seconds=0, on_suggestion=seen.append)

        session.update("Ambo nio pai")
        await session.settle()

        assert session.suggestion == "ka pasa"
        assert seen == ["ka pasa"]
        request = transport.last_request
        assert request.mode is Mode.AUTOCOMPLETE
        assert request.prior_turns == ()
        assert request.current_input == "Ambo nio pai"

    @pytest.mark.asyncio
    async def test_new_input_supersedes_pending_request(self):
        transport = StubTransport(["suggestion"])
        session = AutocompleteSession(transport, quiet_seconds=0.05)

        session.update("Ambo nio")
        await asyncio.sleep(0)
        session.update("Ambo nio pai")
        await session.settle()

        assert [r.current_input for r in transport.requests] == ["Ambo nio pai"]
        assert session.suggestion == "suggestion"

    @pytest.mark.asyncio
    async def test_update_clears_stale_suggestion(self):
        transport = StubTransport(["ka pasa"])
        session = AutocompleteSession(transport, quiet_seconds=0)
        session.update("Ambo nio pai")
        await session.settle()

        session.update("Ambo nio makan")

        assert session.suggestion == ""
        await session.aclose()

    @pytest.mark.asyncio
    async def test_cancel_mid_stream_closes_transport(self):
        gate = asyncio.Event()
        transport = StubTransport(["a", "b"], gate=gate)
        session = AutocompleteSession(transport, quiet_seconds=0)

        session.update("Ambo nio pai")
        for _ in range(3):
            await asyncio.sleep(0)
        assert session.is_loading is True

        await session.aclose()

        assert transport.closed == 1
        assert session.is_loading is False
        assert session.suggestion == ""

    @pytest.mark.asyncio
    async def test_failure_leaves_no_suggestion(self, caplog):
        transport = StubTransport(["x"], fail_after=0)
        session = AutocompleteSession(transport, quiet_seconds=0)

        with caplog.at_level(logging.WARNING, logger="baso"):
            session.update("Ambo nio pai")
            await session.settle()

        assert session.suggestion == ""
        assert "Autocomplete request failed" in caplog.text

    @pytest.mark.asyncio
    async def test_accept_applies_and_clears(self):
        session = AutocompleteSession(StubTransport(["ka pasa."]), quiet_seconds=0)
        session.update("Ambo nio pai")
        await session.settle()

        assert session.accept("Ambo nio pai") == "Ambo nio pai ka pasa"
        assert session.suggestion == ""
        assert session.accept("Ambo") == "Ambo"

    def test_negative_quiet_window_rejected(self):
        with pytest.raises(ValueError):
            AutocompleteSession(StubTransport(), quiet_seconds=-1)

    @pytest.mark.asyncio
    async def test_failing_callback_is_logged_and_suggestion_kept(self, caplog):
        def broken(suggestion):
            raise ValueError("render failed")

        session = AutocompleteSession(
            StubTransport(["ka pasa"]), quiet_seconds=0, on_suggestion=broken
        )

        with caplog.at_level(logging.ERROR, logger="baso"):
            session.update("Ambo nio pai")
            await session.settle()

        assert session.suggestion == "ka pasa"
        assert "Suggestion callback" in caplog.text
        assert session.accept("Ambo nio pai") == "Ambo nio pai ka pasa"


class TestOpenAutocomplete:
    def test_uses_settings_for_quiet_window_and_threshold(self):
        transport = StubTransport()
        settings = Settings(
            gemini_api_key=None, autocomplete_quiet_seconds=0.25, autocomplete_min_chars=3
        )

        session = open_autocomplete(settings=settings, transport=transport, language_preference="id")

        assert session.transport is transport
        assert session.quiet_seconds == 0.25
        assert session.min_chars == 3
        assert session.language_preference == "id"

    @pytest.mark.asyncio
    async def test_min_chars_from_settings_gates_requests(self):
        transport = StubTransport(["lai"])
        settings = Settings(
            gemini_api_key=None, autocomplete_quiet_seconds=0, autocomplete_min_chars=3
        )
        session = open_autocomplete(settings=settings, transport=transport)

        session.update("Apo")
        await session.settle()

        assert [r.current_input for r in transport.requests] == ["Apo"]

    def test_without_key_fails_at_startup(self):
        from baso.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            open_autocomplete(settings=Settings(gemini_api_key=None))
