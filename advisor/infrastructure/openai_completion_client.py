"""
OpenAI-compatible chat completion client.

Posts to a chat completions endpoint with ``requests``.
"""
import logging
import time
from typing import Optional

import requests
from asgiref.sync import sync_to_async
from django.conf import settings

from advisor.ports.completion_client import CompletionClient
from core.domain.exceptions import UpstreamUnavailableError
from core.metrics import advisor_completion_duration_seconds

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "Sorry, I couldn't generate a response."


class OpenAICompletionClient(CompletionClient):
    """Completion client for OpenAI's chat completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize client, defaulting every option from settings.

        Args:
            api_key: Provider API key
            api_url: Chat completions endpoint
            model: Model name
            max_tokens: Maximum answer length in tokens
            temperature: Sampling temperature
            timeout: Request timeout in seconds
        """
        self.api_key = api_key if api_key is not None else settings.ADVISOR_API_KEY
        self.api_url = api_url or settings.ADVISOR_API_URL
        self.model = model or settings.ADVISOR_MODEL
        self.max_tokens = max_tokens or settings.ADVISOR_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.ADVISOR_TEMPERATURE
        self.timeout = timeout or settings.ADVISOR_TIMEOUT_SECONDS

    def _post(self, system_prompt: str, question: str) -> str:
        if not self.api_key:
            raise UpstreamUnavailableError("AI service is not configured")

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": question},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        start = time.time()
        try:
            response = requests.post(
                self.api_url, json=body, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Completion request failed: {e}")
            raise UpstreamUnavailableError(f"AI service error: {e}") from e
        except ValueError as e:
            raise UpstreamUnavailableError("AI service returned an invalid response") from e
        finally:
            advisor_completion_duration_seconds.observe(time.time() - start)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content or FALLBACK_ANSWER

    async def complete(self, system_prompt: str, question: str) -> str:
        return await sync_to_async(self._post, thread_sensitive=False)(system_prompt, question)
