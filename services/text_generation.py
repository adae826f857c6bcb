"""
Best-effort client for an OpenAI-compatible chat-completion endpoint (Groq by default).

generate() never raises: a missing key, a transport error, a non-2xx status or
an unexpected body all come back as the caller's fallback.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_MODEL = "llama-3.1-8b-instant"


class TextGenerator:
    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 15.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=5.0))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TextGenerator":
        return cls(
            api_key=config.get("GROQ_API_KEY"),
            api_url=config.get("GROQ_API_URL", DEFAULT_API_URL),
            model=config.get("GROQ_MODEL", DEFAULT_MODEL),
            timeout=float(config.get("TEXTGEN_TIMEOUT_SECONDS", 15)),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def generate(
        self,
        prompt: str,
        *,
        max_tokens: int = 150,
        temperature: float = 0.7,
        fallback: Optional[str] = None,
    ) -> Optional[str]:
        if not self.enabled:
            logger.debug("Text generation disabled: no API key configured")
            return fallback

        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            response = self._client.post(self.api_url, json=body, headers=headers)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except httpx.HTTPError as exc:
            logger.warning("Text generation request failed: %s", exc)
            return fallback
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("Text generation returned an unexpected body: %r", exc)
            return fallback

        if not isinstance(content, str) or not content.strip():
            return fallback
        return content.strip()

    def close(self):
        self._client.close()
