"""
Generated insults for the loser screen.

One POST to the Gemini generateContent endpoint. Without an API key no
request is made and the canned line is returned.
"""

import time
from typing import Any, Callable, Optional

import requests

from warden.core.config import InsultConfig
from warden.utils.logger import get_logger

logger = get_logger(__name__)


PENDING_MESSAGE = "The Warden is contemplating your failure..."
FALLBACK_INSULT = "Even the AI pities you. That's how badly you lost."
SPEECHLESS_INSULT = "You've failed so badly, the AI is speechless."

PROMPT_TEMPLATE = (
    "You are The Warden, a witty and condescending character. Directly insult a "
    "user who just failed a simple 5-letter word puzzle. The insult should be a "
    "single, complete sentence. Do not offer choices, use numbered lists, or use "
    "asterisks. (PromptID: {prompt_id})"
)


class InsultError(Exception):
    """Insult request errors."""

    pass


def build_prompt(prompt_id: Optional[int] = None) -> str:
    """Prompt text; the id keeps repeated prompts from being cached."""
    if prompt_id is None:
        prompt_id = int(time.time() * 1000)
    return PROMPT_TEMPLATE.format(prompt_id=prompt_id)


def extract_text(payload: Any) -> Optional[str]:
    """
    Pull candidates[0].content.parts[0].text out of a response body.

    Returns:
        The stripped text, or None if any level is missing
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None

    if not isinstance(text, str):
        return None

    return text.strip() or None


class InsultClient:
    """Client for the remote text-generation endpoint."""

    def __init__(
        self,
        config: InsultConfig,
        session: Optional[requests.Session] = None,
        prompt_factory: Callable[[], str] = build_prompt,
    ):
        """
        Initialize client.

        Args:
            config: Endpoint, model and credential
            session: HTTP session (a new one is created if omitted)
            prompt_factory: Builds the prompt for each request
        """
        self._config = config
        self._session = session
        self._prompt_factory = prompt_factory

    @property
    def has_credential(self) -> bool:
        return bool(self._config.api_key)

    @property
    def url(self) -> str:
        return f"{self._config.endpoint}/{self._config.model}:generateContent"

    def request_insult(self) -> str:
        """
        Request one insult.

        Returns:
            Generated text, or SPEECHLESS_INSULT if the reply has no text

        Raises:
            InsultError: If no credential is configured or the request fails
        """
        if not self.has_credential:
            raise InsultError("No API key configured")

        payload = {"contents": [{"parts": [{"text": self._prompt_factory()}]}]}
        session = self._session or requests.Session()

        try:
            response = session.post(
                self.url,
                params={"key": self._config.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise InsultError(f"API request failed: {e}") from e
        except ValueError as e:
            raise InsultError(f"API returned invalid JSON: {e}") from e
        finally:
            if self._session is None:
                session.close()

        return extract_text(body) or SPEECHLESS_INSULT

    def fetch_insult(self) -> str:
        """
        Get an insult, never raising.

        Returns:
            Generated text, or FALLBACK_INSULT when there is no credential
            or the request fails
        """
        if not self.has_credential:
            logger.info("No API key configured, using canned insult")
            return FALLBACK_INSULT

        try:
            return self.request_insult()
        except InsultError as e:
            logger.error(f"Error generating insult: {e}")
            return FALLBACK_INSULT
