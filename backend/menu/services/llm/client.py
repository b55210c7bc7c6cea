"""LLM client with multi-provider support and automatic fallback."""
import enum
import logging
from typing import Optional, cast

from anthropic import AsyncAnthropic
from anthropic.types import TextBlock
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionSystemMessageParam, ChatCompletionUserMessageParam

from menu.core.config import settings

logger = logging.getLogger(__name__)


class LLMProvider(str, enum.Enum):
    """Supported LLM providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class LLMClient:
    """
    LLM client abstraction with multi-provider support.

    Supports Anthropic (Claude) and OpenAI with automatic fallback from
    Anthropic to OpenAI on failure, when an OpenAI key is configured.
    Provider clients are created on first use; a missing API key fails at
    that point with ``ValueError``.
    """

    def __init__(
        self,
        provider: LLMProvider = LLMProvider.ANTHROPIC,
        anthropic_api_key: str | None = None,
        openai_api_key: str | None = None,
    ):
        """
        Initialize LLM client.

        Args:
            provider: Primary LLM provider to use (defaults to Anthropic)
            anthropic_api_key: Anthropic key (falls back to settings)
            openai_api_key: OpenAI key (falls back to settings)
        """
        self.provider = provider
        self.anthropic_api_key = anthropic_api_key or settings.anthropic_api_key
        self.openai_api_key = openai_api_key or settings.openai_api_key
        self._anthropic: Optional[AsyncAnthropic] = None
        self._openai: Optional[AsyncOpenAI] = None

    @property
    def anthropic(self) -> AsyncAnthropic:
        """Lazy-load Anthropic client."""
        if not self._anthropic:
            if not self.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY not configured")
            self._anthropic = AsyncAnthropic(api_key=self.anthropic_api_key)
        return self._anthropic

    @property
    def openai(self) -> AsyncOpenAI:
        """Lazy-load OpenAI client."""
        if not self._openai:
            if not self.openai_api_key:
                raise ValueError("OPENAI_API_KEY not configured")
            self._openai = AsyncOpenAI(api_key=self.openai_api_key)
        return self._openai

    async def complete(
        self,
        prompt: str,
        system: str = "",
        max_tokens: int = 4000,
        temperature: float = 0.7,
    ) -> dict:
        """
        Generate completion with automatic fallback.

        Args:
            prompt: User prompt/message
            system: System message/instructions
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0-1.0)

        Returns:
            Dictionary with completion response containing:
                - content: Generated text
                - provider: Provider used
                - model: Model name
                - input_tokens: Input token count
                - output_tokens: Output token count

        Raises:
            Exception: If the primary provider fails and no fallback is available
        """
        try:
            if self.provider == LLMProvider.ANTHROPIC:
                return await self._complete_anthropic(prompt, system, max_tokens, temperature)
            return await self._complete_openai(prompt, system, max_tokens, temperature)
        except Exception as e:
            # Only fallback from Anthropic to OpenAI, not the reverse
            if self.provider == LLMProvider.ANTHROPIC and self.openai_api_key:
                logger.warning(f"Anthropic completion failed, falling back to OpenAI: {e}")
                return await self._complete_openai(prompt, system, max_tokens, temperature)
            raise

    async def _complete_anthropic(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> dict:
        """Generate completion using Anthropic Claude."""
        model = settings.anthropic_model
        kwargs = {"system": system} if system else {}
        response = await self.anthropic.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        first_block = response.content[0]
        if not isinstance(first_block, TextBlock):
            raise ValueError("Unexpected response format from Anthropic")

        return {
            "content": cast(TextBlock, first_block).text,
            "provider": LLMProvider.ANTHROPIC.value,
            "model": model,
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
        }

    async def _complete_openai(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> dict:
        """Generate completion using OpenAI."""
        model = settings.openai_model
        messages: list[ChatCompletionSystemMessageParam | ChatCompletionUserMessageParam] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = await self.openai.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=messages,
        )

        content = response.choices[0].message.content or ""
        prompt_tokens = response.usage.prompt_tokens if response.usage else 0
        completion_tokens = response.usage.completion_tokens if response.usage else 0

        return {
            "content": content,
            "provider": LLMProvider.OPENAI.value,
            "model": model,
            "input_tokens": prompt_tokens,
            "output_tokens": completion_tokens,
        }
