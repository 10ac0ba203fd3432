"""LocalPublisher: writes rendered artifacts to an output directory."""

from __future__ import annotations

import logging
from pathlib import Path

from diagrammer.publish.models import PublishResult, PublishTarget, TargetKind
from diagrammer.spec.models import DiagramSpecification

logger = logging.getLogger(__name__)


def artifact_filename(spec: DiagramSpecification, ext: str) -> str:
    """``<name>.<ext>``; the name is already a safe slug."""
    return f"{spec.name}.{ext.lstrip('.')}"


class LocalPublisher:
    """Writes ``<output_dir>/<name>.<ext>``, overwriting any previous copy."""

    def __init__(self, target: PublishTarget) -> None:
        self.target = target
        self.base_dir = Path(target.destination_path)

    def publish(
        self, spec: DiagramSpecification, data: bytes, *, ext: str = "png"
    ) -> PublishResult:
        dest = self.base_dir / artifact_filename(spec, ext)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        logger.info("wrote %s (%d bytes)", dest, len(data))
        return PublishResult(
            target_kind=TargetKind.local,
            resolved_locator=str(dest.resolve()),
            committed=True,
        )
