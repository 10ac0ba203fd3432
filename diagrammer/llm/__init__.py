"""Model-call adapters used by ``diagrammer generate``."""

import os

from diagrammer.config.models import LLMSettings
from diagrammer.llm.base import LLMProvider
from diagrammer.llm.claude import ClaudeProvider
from diagrammer.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage
from diagrammer.llm.openai_adapter import OpenAIProvider
from diagrammer.llm.prompts import build_prompts

PROVIDERS: dict[str, type[LLMProvider]] = {
    "anthropic": ClaudeProvider,
    "openai": OpenAIProvider,
}


def create_llm_provider(settings: LLMSettings) -> LLMProvider:
    """Instantiate the adapter named by ``settings.provider``.

    The key is looked up in the environment variable ``settings.api_key_env``
    so it never has to appear in diagrammer.yaml.
    """
    try:
        provider_cls = PROVIDERS[settings.provider]
    except KeyError:
        known = ", ".join(sorted(PROVIDERS))
        raise ValueError(
            f"Unsupported LLM provider {settings.provider!r} (known: {known})"
        ) from None

    api_key = os.environ.get(settings.api_key_env, "")
    if not api_key:
        raise ValueError(
            f"Missing API key: {settings.api_key_env} is not set "
            f"(configure llm.api_key_env to use another variable)"
        )

    return provider_cls(
        LLMConfig(
            provider=settings.provider,
            model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            api_key=api_key,
        )
    )


__all__ = [
    "PROVIDERS",
    "ClaudeProvider",
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "OpenAIProvider",
    "TokenUsage",
    "build_prompts",
    "create_llm_provider",
]
