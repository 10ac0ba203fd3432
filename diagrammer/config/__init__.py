from .loader import load_config
from .models import (
    AzureDevOpsTargetConfig,
    DiagrammerConfig,
    GitHubTargetConfig,
    LLMSettings,
    LocalTargetConfig,
    PublishConfig,
    RenderConfig,
    RenderProfile,
    WorkspaceConfig,
)

__all__ = [
    "AzureDevOpsTargetConfig",
    "DiagrammerConfig",
    "GitHubTargetConfig",
    "LLMSettings",
    "LocalTargetConfig",
    "PublishConfig",
    "RenderConfig",
    "RenderProfile",
    "WorkspaceConfig",
    "load_config",
]
