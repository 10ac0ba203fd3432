"""PublishCoordinator: sends the current artifact to one or all targets."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from diagrammer.config.models import DiagrammerConfig
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
from diagrammer.spec.models import DiagramSpecification

logger = logging.getLogger(__name__)

# Order used by publish_all.
TARGET_ORDER: tuple[TargetKind, ...] = (
    TargetKind.local,
    TargetKind.github,
    TargetKind.azure_devops,
)


class PublishCoordinator:
    """Dispatches to a LocalPublisher or GitPublisher per resolved target."""

    def __init__(self, targets: Mapping[TargetKind, PublishTarget]) -> None:
        self.targets = dict(targets)

    @classmethod
    def from_config(
        cls, config: DiagrammerConfig, env: Mapping[str, str] | None = None
    ) -> PublishCoordinator:
        return cls(resolve_targets(config, env))

    def is_configured(self, kind: TargetKind) -> bool:
        return kind in self.targets

    def publisher(self, kind: TargetKind) -> LocalPublisher | GitPublisher:
        target = self.targets.get(kind)
        if target is None:
            raise PublishError(
                PublishErrorKind.missing_config,
                kind,
                "target is not configured; check credentials and repository settings",
            )
        if target.is_git:
            return GitPublisher(target)
        return LocalPublisher(target)

    def publish(
        self,
        spec: DiagramSpecification,
        data: bytes,
        kind: TargetKind,
        *,
        ext: str = "png",
    ) -> PublishResult:
        """Publish to a single named target."""
        return self.publisher(kind).publish(spec, data, ext=ext)

    def publish_all(
        self, spec: DiagramSpecification, data: bytes, *, ext: str = "png"
    ) -> list[PublishResult]:
        """Publish to every configured target, stopping at the first failure."""
        results: list[PublishResult] = []
        for kind in TARGET_ORDER:
            if not self.is_configured(kind):
                logger.info("skipping %s: not configured", kind.value)
                continue
            results.append(self.publish(spec, data, kind, ext=ext))
        return results


def markdown_reference(spec: DiagramSpecification, result: PublishResult) -> str:
    """Markdown image link for a published artifact."""
    return f"![{spec.title}]({result.resolved_locator})"
