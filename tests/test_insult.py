"""
Tests for the insult client.
"""

import pytest
import requests

from warden.core.config import InsultConfig
from warden.services.insult import (
    FALLBACK_INSULT,
    SPEECHLESS_INSULT,
    InsultClient,
    InsultError,
    build_prompt,
    extract_text,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, bad_json=False):
        self.status_code = status_code
        self._body = body
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._body


class FakeSession:
    """Records post() calls and returns a canned response or raises."""

    def __init__(self, response=None, error=None):
        self.calls = []
        self._response = response
        self._error = error

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


def reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def config():
    return InsultConfig(api_key="test-key", model="test-model", endpoint="https://example.invalid/models")


class TestExtractText:
    """Tests for extract_text."""

    def test_nested_text(self):
        assert extract_text(reply("  You are slow.  ")) == "You are slow."

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
            reply("   "),
            None,
            ["not", "a", "dict"],
        ],
    )
    def test_missing_text(self, payload):
        assert extract_text(payload) is None


class TestBuildPrompt:
    def test_prompt_id_included(self):
        prompt = build_prompt(1234)

        assert "(PromptID: 1234)" in prompt
        assert "single, complete sentence" in prompt


class TestInsultClient:
    """Tests for InsultClient."""

    def test_missing_key_returns_canned_without_network(self):
        """Test that no request is attempted without a credential."""
        session = FakeSession(response=FakeResponse(body=reply("unused")))
        client = InsultClient(InsultConfig(api_key=None), session=session)

        assert client.fetch_insult() == FALLBACK_INSULT
        assert session.calls == []

    def test_empty_key_counts_as_missing(self):
        session = FakeSession()
        client = InsultClient(InsultConfig(api_key=""), session=session)

        assert client.fetch_insult() == FALLBACK_INSULT
        assert session.calls == []

    def test_request_insult_without_key_raises(self):
        with pytest.raises(InsultError):
            InsultClient(InsultConfig(api_key=None)).request_insult()

    def test_successful_request(self, config):
        session = FakeSession(response=FakeResponse(body=reply("Even a pigeon guesses better.")))
        client = InsultClient(config, session=session, prompt_factory=lambda: "PROMPT")

        assert client.fetch_insult() == "Even a pigeon guesses better."

        url, kwargs = session.calls[0]
        assert url == "https://example.invalid/models/test-model:generateContent"
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["json"] == {"contents": [{"parts": [{"text": "PROMPT"}]}]}
        assert kwargs["timeout"] == config.timeout_seconds

    def test_empty_reply_is_speechless(self, config):
        session = FakeSession(response=FakeResponse(body={"candidates": []}))

        assert InsultClient(config, session=session).fetch_insult() == SPEECHLESS_INSULT

    def test_http_error_falls_back(self, config):
        session = FakeSession(response=FakeResponse(status_code=500, body={}))

        assert InsultClient(config, session=session).fetch_insult() == FALLBACK_INSULT

    def test_connection_error_falls_back(self, config):
        session = FakeSession(error=requests.ConnectionError("offline"))

        assert InsultClient(config, session=session).fetch_insult() == FALLBACK_INSULT

    def test_bad_json_falls_back(self, config):
        session = FakeSession(response=FakeResponse(bad_json=True))

        assert InsultClient(config, session=session).fetch_insult() == FALLBACK_INSULT

    def test_request_error_is_wrapped(self, config):
        session = FakeSession(error=requests.Timeout("slow"))

        with pytest.raises(InsultError, match="API request failed"):
            InsultClient(config, session=session).request_insult()
