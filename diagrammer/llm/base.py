"""Abstract LLM interface for diagram generation."""

from __future__ import annotations

from abc import ABC, abstractmethod

from diagrammer.llm.models import LLMConfig, LLMResponse


class LLMProvider(ABC):
    """Provider-agnostic interface for the one model call we make.

    The response is free-form text that should contain a JSON diagram
    specification; turning it into one is not the provider's job.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abstractmethod
    async def generate(
        self,
        system: str,
        user: str,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a complete response (one-shot)."""
        ...
