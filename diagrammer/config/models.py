from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LLMSettings(_Frozen):
    provider: Literal["anthropic", "openai"] = "anthropic"
    model: str = "claude-sonnet-4-5-20250929"
    api_key_env: str = "ANTHROPIC_API_KEY"
    max_tokens: int = Field(default=8192, gt=0)
    temperature: float = Field(default=0.3, ge=0)


class WorkspaceConfig(_Frozen):
    directory: str = ".diagrammer/workspace"


class RenderProfile(_Frozen):
    """How one output kind is turned into an artifact.

    ``command`` is an argv list; ``{source}`` is replaced with the staged
    source path. The interpreter is expected to write
    ``<output_stem>.<artifact_ext>`` next to the source file.
    """

    command: list[str] = Field(min_length=1)
    source_ext: str
    artifact_ext: str = "png"
    output_stem: str = "render"

    @field_validator("output_stem")
    @classmethod
    def _not_reserved(cls, v: str) -> str:
        # the workspace keeps the last good render under "artifact.<ext>"
        if v in ("artifact", ""):
            raise ValueError(f"output_stem {v!r} is reserved")
        return v


def _program_profile() -> RenderProfile:
    return RenderProfile(command=["python3", "{source}"], source_ext="py")


def _markup_profile() -> RenderProfile:
    return RenderProfile(
        command=["plantuml", "-tpng", "{source}"],
        source_ext="puml",
        output_stem="source",
    )


class RenderConfig(_Frozen):
    program: RenderProfile = Field(default_factory=_program_profile)
    markup: RenderProfile = Field(default_factory=_markup_profile)
    timeout: int | None = Field(default=None, gt=0)


class LocalTargetConfig(_Frozen):
    output_dir: str = "./output"


class GitTargetSettings(_Frozen):
    """Settings shared by every git-backed publish target."""

    token_env: str
    repo: str = "diagrams"
    branch: str = "main"
    folder: str = "images"
    user_name: str = "Diagram Bot"
    user_email: str = "diagrams@example.com"
    remote_url: str | None = None
    clone_dir: str | None = None


class GitHubTargetConfig(GitTargetSettings):
    token_env: str = "GITHUB_TOKEN"
    owner: str | None = None


class AzureDevOpsTargetConfig(GitTargetSettings):
    token_env: str = "AZDO_TOKEN"
    org: str | None = None
    project: str | None = None


class PublishConfig(_Frozen):
    local: LocalTargetConfig = Field(default_factory=LocalTargetConfig)
    github: GitHubTargetConfig = Field(default_factory=GitHubTargetConfig)
    azure_devops: AzureDevOpsTargetConfig = Field(default_factory=AzureDevOpsTargetConfig)
    commit_prefix: str = "docs(diagrams): update architecture diagrams"


class DiagrammerConfig(_Frozen):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
