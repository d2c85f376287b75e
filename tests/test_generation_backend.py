"""
Tests for agents/generation_backend.py — Gemini provider and error mapping.

Uses MockGeminiClient from conftest; no live Gemini connection needed.
"""

import asyncio

import pytest
from google.genai import errors as genai_errors

from agents.generation_backend import GeminiBackend, build_gemini_backend
from agents.generation_errors import (
    GenerationDisabledError,
    GenerationError,
    GenerationUnavailableError,
)
from tests.conftest import MockGeminiClient
from tools.settings import EngineSettings


def _client_error(code, status):
    return genai_errors.ClientError(code, {"error": {"code": code, "message": status, "status": status}})


def _respond(backend):
    return asyncio.run(backend.respond("system", "prompt", 0.7))


class TestGeminiBackend:

    def test_returns_text(self):
        client = MockGeminiClient(["You walk on."])
        backend = GeminiBackend(client, model_id="gemini-test")
        assert _respond(backend) == "You walk on."

    def test_passes_model_prompt_and_config(self):
        client = MockGeminiClient(["ok"])
        _respond(GeminiBackend(client, model_id="gemini-test"))
        call = client.calls[0]
        assert call["model"] == "gemini-test"
        assert call["contents"] == "prompt"
        assert call["config"].system_instruction == "system"
        assert call["config"].temperature == 0.7

    def test_none_text_becomes_empty(self):
        client = MockGeminiClient([None])
        assert _respond(GeminiBackend(client)) == ""

    def test_no_client_is_unavailable(self):
        with pytest.raises(GenerationUnavailableError):
            _respond(GeminiBackend(None))

    def test_forbidden_is_disabled(self):
        client = MockGeminiClient([_client_error(403, "PERMISSION_DENIED")])
        with pytest.raises(GenerationDisabledError):
            _respond(GeminiBackend(client))

    def test_other_client_error_is_generic(self):
        client = MockGeminiClient([_client_error(429, "RESOURCE_EXHAUSTED")])
        with pytest.raises(GenerationError) as excinfo:
            _respond(GeminiBackend(client))
        assert not isinstance(excinfo.value, GenerationDisabledError)


class TestBuildGeminiBackend:

    def test_no_key_returns_none(self):
        settings = EngineSettings.from_env({})
        assert build_gemini_backend(settings) is None

    def test_with_key(self):
        settings = EngineSettings.from_env({"GEMINI_API_KEY": "test-key", "STORY_MODEL_ID": "gemini-x"})
        backend = build_gemini_backend(settings)
        assert isinstance(backend, GeminiBackend)
        assert backend.model_id == "gemini-x"
