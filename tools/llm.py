import os
from typing import Dict, List
from loguru import logger

DEFAULT_MODEL = "llama3-8b-8192"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"


class ModelInvocationError(Exception):
    """Raised when the text-generation provider cannot produce a reply."""


class LLMClient:
    """Text-generation client for Groq-hosted models (OpenAI-compatible API)."""

    def __init__(self):
        self.api_key = os.getenv("GROQ_API_KEY")
        self.model = os.getenv("GROQ_MODEL", DEFAULT_MODEL)
        self.base_url = os.getenv("GROQ_BASE_URL", DEFAULT_BASE_URL)
        self._client = None

        if not self.api_key:
            logger.warning("No Groq API key provided, using mock mode")

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def complete(self, prompt: str, temperature: float = 0.7, max_tokens: int = 2000) -> str:
        """
        Send a single-turn prompt and return the model's raw text.

        Args:
            prompt: Instruction string
            temperature: Sampling temperature
            max_tokens: Completion token limit

        Returns:
            Raw reply text (empty string in mock mode)
        """
        return self.chat([{"role": "user", "content": prompt}], temperature, max_tokens)

    def chat(self, messages: List[Dict[str, str]], temperature: float = 0.7, max_tokens: int = 1000) -> str:
        """
        Send a list of chat messages and return the model's raw text.

        Raises:
            ModelInvocationError: If the provider call fails
        """
        if not self.api_key:
            logger.info("Using mock LLM completion")
            return ""

        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
            content = response.choices[0].message.content or ""
            logger.info(f"LLM completion received: {len(content)} chars from {self.model}")
            return content

        except Exception as e:
            logger.error(f"LLM completion failed: {e}")
            raise ModelInvocationError(str(e)) from e


# Global LLM client instance
llm_client = LLMClient()


def complete(prompt: str, temperature: float = 0.7, max_tokens: int = 2000) -> str:
    """Complete a prompt using the global LLM client."""
    return llm_client.complete(prompt, temperature, max_tokens)


def chat(messages: List[Dict[str, str]], temperature: float = 0.7, max_tokens: int = 1000) -> str:
    """Run a chat completion using the global LLM client."""
    return llm_client.chat(messages, temperature, max_tokens)
