"""Pydantic models and errors for publish targets."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TargetKind(str, Enum):
    local = "local"
    github = "github"
    azure_devops = "azure_devops"


class PublishErrorKind(str, Enum):
    clone_failed = "clone_failed"
    push_failed = "push_failed"
    missing_config = "missing_config"


class PublishError(Exception):
    """Publishing to one target failed; ``target`` says which."""

    def __init__(self, kind: PublishErrorKind, target: TargetKind, message: str) -> None:
        self.kind = kind
        self.target = target
        super().__init__(f"{target.value}: {message}")


class PublishTarget(BaseModel):
    """A fully resolved destination. Built once per process, never persisted."""

    model_config = ConfigDict(frozen=True)

    kind: TargetKind
    destination_path: str = Field(description="Local output dir or folder inside the repo")
    credentials: str | None = Field(default=None, repr=False)
    remote_url: str | None = Field(default=None, repr=False)
    branch: str = "main"
    author_name: str = "Diagram Bot"
    author_email: str = "diagrams@example.com"
    commit_prefix: str = "docs(diagrams): update architecture diagrams"
    web_url_template: str | None = Field(
        default=None,
        description="Locator for a published file; '{path}' is the path inside the repo",
    )
    clone_dir: str | None = None

    @property
    def is_git(self) -> bool:
        return self.kind is not TargetKind.local


class PublishResult(BaseModel):
    """Outcome for one target. ``committed=False`` means nothing changed."""

    target_kind: TargetKind
    resolved_locator: str
    committed: bool
    path_in_repo: str | None = None
