"""Publish subsystem: local disk and git-backed remotes."""

from diagrammer.publish.coordinator import PublishCoordinator, markdown_reference
from diagrammer.publish.git import GitPublisher
from diagrammer.publish.local import LocalPublisher
from diagrammer.publish.models import (
    PublishError,
    PublishErrorKind,
    PublishResult,
    PublishTarget,
    TargetKind,
)
from diagrammer.publish.targets import resolve_targets

__all__ = [
    "GitPublisher",
    "LocalPublisher",
    "PublishCoordinator",
    "PublishError",
    "PublishErrorKind",
    "PublishResult",
    "PublishTarget",
    "TargetKind",
    "markdown_reference",
    "resolve_targets",
]
