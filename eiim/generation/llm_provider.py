"""LLM provider interface and implementations."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import openai
from openai import OpenAI

from ..exceptions import SummarizationError
from .models import Completion


class LLMProvider(ABC):
    """Abstract base class for chat completion providers."""

    @abstractmethod
    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        """
        Run one chat completion.

        Args:
            model: Model identifier
            messages: Chat messages (role/content dicts)
            max_tokens: Generation cap
            temperature: Sampling temperature

        Returns:
            Generated text with token usage

        Raises:
            SummarizationError: On any transport or API failure
        """
        pass


class OpenRouterProvider(LLMProvider):
    """OpenRouter chat completions through the OpenAI-compatible client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 30.0,
        http_referer: Optional[str] = None,
        app_title: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            base_url: API base URL
            timeout: Request timeout in seconds
            http_referer: Attribution referer header
            app_title: Attribution title header
            client: Prebuilt client (for testing)
        """
        headers = {}
        if http_referer:
            headers["HTTP-Referer"] = http_referer
        if app_title:
            headers["X-Title"] = app_title

        self.client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=headers or None,
        )

    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        """Run a completion against OpenRouter."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.OpenAIError as e:
            raise SummarizationError(f"OpenRouter request failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise SummarizationError(f"Empty completion from {model}")

        usage = response.usage
        return Completion(
            text=response.choices[0].message.content.strip(),
            model=response.model or model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
        )


class MockLLMProvider(LLMProvider):
    """Mock provider for development without an API key."""

    def __init__(self) -> None:
        """Initialize mock provider."""
        self.calls = []

    def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        """Echo a canned response that names the prompt's first line."""
        prompt = messages[-1]["content"] if messages else ""
        first_line = prompt.strip().splitlines()[0] if prompt.strip() else ""
        self.calls.append((model, first_line))

        text = f"[mock {model}] Response to: {first_line[:120]}"
        return Completion(
            text=text,
            model=f"mock/{model}",
            prompt_tokens=len(prompt) // 4,
            completion_tokens=len(text) // 4,
            total_tokens=(len(prompt) + len(text)) // 4,
        )
