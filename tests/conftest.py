"""
Shared pytest fixtures for the story engine test suite.

Fakes for the three injected capabilities (generation backend, spelling
dictionary, Gemini client) live here so every test file builds sessions the
same way.
"""

import re

import pytest

from agents.storyteller import StorytellerAgent
from pipeline.session import StorySession
from tools.item_store import InMemoryItemStore


# ---------------------------------------------------------------------------
# Gemini Mock Helpers (reusable classes)
# ---------------------------------------------------------------------------

class MockGeminiResponse:
    """Simulates a Gemini response with .text property."""

    def __init__(self, text):
        self.text = text


class MockGeminiClient:
    """Mock Gemini client that returns canned responses or raises canned errors.

    Usage:
        client = MockGeminiClient(["response1", SomeError(...)])
        resp = await client.aio.models.generate_content(model=..., contents=...)
        assert resp.text == "response1"
    """

    def __init__(self, responses=None):
        self._responses = responses or []
        self._call_count = 0
        self.calls = []

    @property
    def aio(self):
        return self

    @property
    def models(self):
        return self

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self._call_count < len(self._responses):
            resp = self._responses[self._call_count]
        else:
            resp = ""
        self._call_count += 1
        if isinstance(resp, Exception):
            raise resp
        if isinstance(resp, str) or resp is None:
            return MockGeminiResponse(resp)
        return resp


# ---------------------------------------------------------------------------
# Capability doubles
# ---------------------------------------------------------------------------

class ScriptedBackend:
    """GenerationBackend double. Each call pops the next reply or raises it."""

    def __init__(self, replies=None):
        self._replies = list(replies or [])
        self.calls = []

    async def respond(self, system_instructions, prompt, temperature):
        self.calls.append({
            "system_instructions": system_instructions,
            "prompt": prompt,
            "temperature": temperature,
        })
        reply = self._replies.pop(0) if self._replies else "The story continues."
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeDictionary:
    """SpellingDictionary double.

    `misspellings` maps a lowercase word to its suggestion list. Only those
    words are reported as misspelled; everything else is accepted.
    """

    _TOKEN_RE = re.compile(r"[A-Za-z']+")

    def __init__(self, misspellings=None):
        self.misspellings = {k.lower(): v for k, v in (misspellings or {}).items()}
        self.suggestion_calls = []

    def misspelled_range(self, text, start):
        for m in self._TOKEN_RE.finditer(text, start):
            if m.start() > 0 and text[m.start() - 1].isalpha():
                continue
            if m.group(0).lower() in self.misspellings:
                return m.span()
        return None

    def suggestions(self, text, span):
        token = text[span[0]:span[1]]
        self.suggestion_calls.append(token)
        return list(self.misspellings.get(token.lower(), []))


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def item_store():
    return InMemoryItemStore(["Knife", "Rope", "Potion"])


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def dictionary():
    return FakeDictionary({
        "teh": ["the", "ten"],
        "wiht": ["with"],
        "dor": ["door", "dog"],
        "opne": ["open"],
        "swrod": ["sword"],
        "rop": ["rip", "rope"],
    })


@pytest.fixture
def make_session(item_store, dictionary, backend):
    """Factory for StorySession with no pacing delay and no root check."""

    def _make(**overrides):
        storyteller = overrides.pop("storyteller", None) or StorytellerAgent(
            overrides.pop("backend", backend)
        )
        kwargs = {
            "item_store": item_store,
            "dictionary": dictionary,
            "storyteller": storyteller,
            "privileged": False,
            "turn_delay": 0,
        }
        kwargs.update(overrides)
        return StorySession(**kwargs)

    return _make
