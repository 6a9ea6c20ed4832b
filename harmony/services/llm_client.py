"""
OpenAI API Client

Thin wrapper over the openai library used by the AI features
(post suggestions, post enhancement, video-resume feedback).

The client is optional: when OPENAI_API_KEY is missing or clearly not a
real key, is_configured() is False and callers use their static fallbacks.
"""
import json
from typing import Optional

from loguru import logger
from openai import OpenAI

from harmony.core.config import get_settings

MIN_KEY_LENGTH = 20


class LLMClient:
    """
    Wrapper for chat completions that return JSON objects.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.base_url = base_url or settings.openai_base_url
        self._client: Optional[OpenAI] = None

    def is_configured(self) -> bool:
        return bool(self.api_key) and len(self.api_key) >= MIN_KEY_LENGTH

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000,
                  temperature: float = 0.7) -> str:
        """
        Internal method to call the chat completions API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"}
        )
        return response.choices[0].message.content or ""

    def _extract_json(self, text: str) -> dict:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def complete_json(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> dict:
        """Call the API and parse the reply as a JSON object."""
        if not self.is_configured():
            raise RuntimeError("OpenAI API key is not configured")
        result = self._extract_json(self._call_api(system_prompt, user_content, max_tokens))
        if not isinstance(result, dict):
            raise ValueError("Expected a JSON object from the model")
        return result

    def test_connection(self) -> bool:
        """Test if the API is reachable"""
        if not self.is_configured():
            return False
        try:
            result = self.complete_json(
                "You are a test assistant. Reply in JSON.",
                'Reply with exactly: {"status": "OK"}',
                max_tokens=10
            )
            return str(result.get("status", "")).upper() == "OK"
        except Exception as e:
            logger.warning(f"OpenAI connection failed: {e}")
            return False


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the LLM client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
