"""ArtifactStore: the single-item staging area on disk.

Layout (fixed names, one of each at a time)::

    <workspace>/spec.json         current DiagramSpecification
    <workspace>/source.<ext>      sanitized source handed to the interpreter
    <workspace>/artifact.<ext>    last successfully rendered artifact

``stage`` is the only operation that changes spec.json; ``regenerate``
only ever replaces the artifact. The artifact may lag behind the source
when the user hand-edits source.<ext> and has not regenerated yet.
No locking: concurrent writers race and the last one wins.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from diagrammer.render.renderer import Renderer
from diagrammer.spec.models import DiagramSpecification, OutputKind
from diagrammer.spec.sanitizer import bind_output_path, sanitize

logger = logging.getLogger(__name__)

SPEC_FILE = "spec.json"
SOURCE_STEM = "source"
ARTIFACT_STEM = "artifact"


class WorkspaceNotFoundError(FileNotFoundError):
    """Nothing (or not the requested piece) has been staged yet."""


class ArtifactStore:
    """Persists the current spec, its source and its rendered artifact."""

    def __init__(self, directory: str | Path, renderer: Renderer) -> None:
        self.directory = Path(directory).resolve()
        self.renderer = renderer

    @property
    def spec_path(self) -> Path:
        return self.directory / SPEC_FILE

    @property
    def is_staged(self) -> bool:
        return self.spec_path.is_file()

    def source_path(self, output_kind: OutputKind) -> Path:
        ext = self.renderer.profile(output_kind).source_ext
        return self.directory / f"{SOURCE_STEM}.{ext}"

    def artifact_path(self, output_kind: OutputKind) -> Path:
        ext = self.renderer.profile(output_kind).artifact_ext
        return self.directory / f"{ARTIFACT_STEM}.{ext}"

    # -- mutators ----------------------------------------------------------

    def stage(self, spec: DiagramSpecification) -> Path:
        """Make *spec* current, write its source and render it.

        Returns the artifact path. A RenderError propagates after the spec
        and source are written; any earlier artifact is left as it was.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        self.spec_path.write_text(spec.model_dump_json(indent=2), encoding="utf-8")
        logger.info("staged spec %r in %s", spec.name, self.directory)

        source_path = self.source_path(spec.output_kind)
        self._remove_siblings(SOURCE_STEM, keep=source_path)

        code = spec.source_code
        if spec.output_kind is OutputKind.program:
            stem = self.renderer.expected_output(source_path, spec.output_kind).with_suffix("")
            code = bind_output_path(sanitize(code), stem)
        source_path.write_text(code, encoding="utf-8")
        logger.debug("wrote %s (%d bytes)", source_path, len(code))

        return self._render(spec.output_kind)

    def regenerate(self) -> Path:
        """Re-render the persisted (possibly hand-edited) source file."""
        spec = self.load()
        return self._render(spec.output_kind)

    def purge(self) -> None:
        """Delete the whole workspace. Safe to call when it does not exist."""
        if self.directory.exists():
            shutil.rmtree(self.directory)
            logger.info("removed workspace %s", self.directory)

    # -- readers -----------------------------------------------------------

    def load(self) -> DiagramSpecification:
        if not self.spec_path.is_file():
            raise WorkspaceNotFoundError(
                f"No diagram staged in {self.directory}. Run 'generate' first."
            )
        return DiagramSpecification.model_validate_json(
            self.spec_path.read_text(encoding="utf-8")
        )

    def load_artifact_bytes(self) -> bytes:
        artifact = self.artifact_path(self.load().output_kind)
        if not artifact.is_file():
            raise WorkspaceNotFoundError(
                f"No rendered artifact in {self.directory}. Run 'generate' or 'regenerate' first."
            )
        return artifact.read_bytes()

    # -- internals ---------------------------------------------------------

    def _render(self, output_kind: OutputKind) -> Path:
        source_path = self.source_path(output_kind)
        if not source_path.is_file():
            raise WorkspaceNotFoundError(f"Staged source {source_path} is missing")

        rendered = self.renderer.render(source_path, output_kind)
        artifact = self.artifact_path(output_kind)
        os.replace(rendered, artifact)
        self._remove_siblings(ARTIFACT_STEM, keep=artifact)
        logger.info("artifact ready at %s", artifact)
        return artifact

    def _remove_siblings(self, stem: str, keep: Path) -> None:
        for stale in self.directory.glob(f"{stem}.*"):
            if stale != keep:
                stale.unlink()
