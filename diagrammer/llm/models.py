"""Request and response models for the model-call adapters."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMError(Exception):
    """Wraps provider-specific exceptions with context."""

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        super().__init__(f"{provider} {operation} failed: {cause}")
        self.__cause__ = cause


class LLMConfig(BaseModel):
    """Provider-level settings, built from ``LLMSettings`` plus the resolved key."""

    provider: Literal["anthropic", "openai"]
    model: str
    max_tokens: int = 8192
    temperature: float = 0.3
    api_key: str | None = Field(default=None, repr=False)


class TokenUsage(BaseModel):
    input_tokens: int
    output_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMResponse(BaseModel):
    """Raw text of one completion; expected to hold a JSON diagram spec."""

    content: str
    usage: TokenUsage
    model: str
