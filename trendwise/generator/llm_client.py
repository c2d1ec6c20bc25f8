"""Multi-provider async LLM client abstraction (OpenAI, Anthropic Claude, Google Gemini)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from trendwise.config import PROVIDER_MODEL_PREFIXES
from trendwise.exceptions import GenerationFailure
from trendwise.utils.logger import get_logger

logger = get_logger()


@dataclass
class GenerationResult:
    """Result from an LLM generation call."""

    text: str
    model: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost: float


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for LLM clients. Failures surface as GenerationFailure."""

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationResult: ...


# =============================================================================
# Cost tables (per 1M tokens)
# =============================================================================

OPENAI_COSTS = {
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4-turbo": {"input": 10.00, "output": 30.00},
    "gpt-4": {"input": 30.00, "output": 60.00},
}

ANTHROPIC_COSTS = {
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
}

GOOGLE_COSTS = {
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
    "gemini-2.5-pro": {"input": 1.25, "output": 10.00},
    "gemini-2.5-flash": {"input": 0.15, "output": 0.60},
}


def _estimate_cost(model: str, input_tokens: int, output_tokens: int, cost_table: dict) -> float:
    """Estimate cost using the closest matching model in the cost table."""
    if model in cost_table:
        costs = cost_table[model]
    else:
        # Longest prefix wins so "gpt-4o-2024-08-06" prices as gpt-4o, not gpt-4
        matched = None
        for key in sorted(cost_table, key=len, reverse=True):
            if model.startswith(key):
                matched = cost_table[key]
                break
        costs = matched or {"input": 0.0, "output": 0.0}

    return (input_tokens / 1_000_000 * costs["input"]) + (output_tokens / 1_000_000 * costs["output"])


def _require_key(env_key: str) -> str:
    api_key = os.environ.get(env_key)
    if not api_key:
        raise GenerationFailure(f"{env_key} not set in environment")
    return api_key


def _log_result(result: GenerationResult) -> GenerationResult:
    logger.info(
        "Generated %d chars (%d input + %d output tokens, ~$%.4f)",
        len(result.text), result.input_tokens, result.output_tokens, result.estimated_cost,
    )
    return result


# =============================================================================
# OpenAI Client
# =============================================================================

class OpenAIClient:
    """OpenAI chat completions client in JSON mode."""

    def __init__(self, model: str = "gpt-4o", max_tokens: int = 4000, temperature: float = 0.7):
        import openai

        self.client = openai.AsyncOpenAI(api_key=_require_key("OPENAI_API_KEY"))
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationResult:
        import openai

        logger.info("Generating with %s (max_tokens=%d, temp=%.1f)", self.model, self.max_tokens, self.temperature)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise GenerationFailure(f"OpenAI request failed: {e}") from e

        text = (response.choices[0].message.content if response.choices else None) or ""
        usage = response.usage
        input_tokens = usage.prompt_tokens if usage else 0
        output_tokens = usage.completion_tokens if usage else 0

        return _log_result(GenerationResult(
            text=text,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            estimated_cost=_estimate_cost(self.model, input_tokens, output_tokens, OPENAI_COSTS),
        ))


# =============================================================================
# Claude Client
# =============================================================================

class ClaudeClient:
    """Anthropic Claude API client."""

    def __init__(self, model: str = "claude-sonnet-4-5-20250929", max_tokens: int = 4000, temperature: float = 0.7):
        import anthropic

        self.client = anthropic.AsyncAnthropic(api_key=_require_key("ANTHROPIC_API_KEY"))
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationResult:
        import anthropic

        logger.info("Generating with %s (max_tokens=%d, temp=%.1f)", self.model, self.max_tokens, self.temperature)
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.AnthropicError as e:
            raise GenerationFailure(f"Anthropic request failed: {e}") from e

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens

        return _log_result(GenerationResult(
            text=text,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            estimated_cost=_estimate_cost(self.model, input_tokens, output_tokens, ANTHROPIC_COSTS),
        ))


# =============================================================================
# Google Gemini Client
# =============================================================================

class GeminiClient:
    """Google Gemini API client."""

    def __init__(self, model: str = "gemini-2.0-flash", max_tokens: int = 4000, temperature: float = 0.7):
        import google.generativeai as genai

        genai.configure(api_key=_require_key("GOOGLE_API_KEY"))
        self.genai = genai
        self.model_name = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, user_prompt: str) -> GenerationResult:
        logger.info("Generating with %s (max_tokens=%d, temp=%.1f)", self.model_name, self.max_tokens, self.temperature)

        model = self.genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_prompt,
            generation_config=self.genai.types.GenerationConfig(
                max_output_tokens=self.max_tokens,
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        try:
            response = await model.generate_content_async(user_prompt)
            # .text raises ValueError when the candidate was blocked or empty
            text = response.text
        except Exception as e:
            raise GenerationFailure(f"Gemini request failed: {e}") from e

        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", 0) if usage else 0
        output_tokens = getattr(usage, "candidates_token_count", 0) if usage else 0

        return _log_result(GenerationResult(
            text=text,
            model=self.model_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            estimated_cost=_estimate_cost(self.model_name, input_tokens, output_tokens, GOOGLE_COSTS),
        ))


# =============================================================================
# Factory
# =============================================================================

def detect_provider(model: str) -> str:
    """Auto-detect provider from model name."""
    for provider, prefixes in PROVIDER_MODEL_PREFIXES.items():
        if model.startswith(prefixes):
            return provider
    raise GenerationFailure(
        f"Cannot auto-detect provider for model '{model}'. "
        f"Set 'generation.provider' in config to 'openai', 'anthropic', or 'google'."
    )


def create_llm_client(
    model: str,
    max_tokens: int = 4000,
    temperature: float = 0.7,
    provider: str | None = None,
) -> LLMClient:
    """Create an LLM client for the given provider and model.

    If provider is None, auto-detects from model name.
    """
    if provider is None:
        provider = detect_provider(model)

    if provider == "openai":
        return OpenAIClient(model=model, max_tokens=max_tokens, temperature=temperature)
    elif provider == "anthropic":
        return ClaudeClient(model=model, max_tokens=max_tokens, temperature=temperature)
    elif provider == "google":
        return GeminiClient(model=model, max_tokens=max_tokens, temperature=temperature)
    else:
        raise GenerationFailure(f"Unknown provider '{provider}'. Use 'openai', 'anthropic', or 'google'.")
