"""Run the external interpreter that turns staged source into an artifact."""

from __future__ import annotations

import logging
import subprocess
from enum import Enum
from pathlib import Path

from diagrammer.config.models import RenderConfig, RenderProfile
from diagrammer.spec.models import OutputKind

logger = logging.getLogger(__name__)


class RenderErrorKind(str, Enum):
    interpreter_not_found = "interpreter_not_found"
    interpreter_failed = "interpreter_failed"
    artifact_missing = "artifact_missing"


class RenderError(Exception):
    """The interpreter could not produce an artifact.

    Carries the full stderr and the source that was run so the user can
    edit the staged file and regenerate.
    """

    def __init__(
        self,
        kind: RenderErrorKind,
        message: str,
        *,
        stderr: str = "",
        source: str = "",
        returncode: int | None = None,
    ) -> None:
        self.kind = kind
        self.stderr = stderr
        self.source = source
        self.returncode = returncode
        super().__init__(message)


class Renderer:
    """Spawns one interpreter process per render. No retries."""

    def __init__(self, config: RenderConfig) -> None:
        self.config = config

    def profile(self, output_kind: OutputKind) -> RenderProfile:
        return getattr(self.config, OutputKind(output_kind).value)

    def expected_output(self, source_path: Path, output_kind: OutputKind) -> Path:
        """Where the interpreter is expected to leave its artifact."""
        p = self.profile(output_kind)
        return source_path.parent / f"{p.output_stem}.{p.artifact_ext}"

    def render(self, source_path: str | Path, output_kind: OutputKind) -> Path:
        """Render *source_path* and return the path of the produced artifact."""
        source_path = Path(source_path).resolve()
        profile = self.profile(output_kind)
        output = self.expected_output(source_path, output_kind)
        source = source_path.read_text(encoding="utf-8")

        # A leftover from an earlier run must not pass for fresh output.
        output.unlink(missing_ok=True)

        argv = [arg.replace("{source}", str(source_path)) for arg in profile.command]
        logger.info("rendering %s with %s", source_path.name, argv[0])
        try:
            result = subprocess.run(
                argv,
                cwd=source_path.parent,
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
            )
        except FileNotFoundError as e:
            raise RenderError(
                RenderErrorKind.interpreter_not_found,
                f"Failed to start {argv[0]!r}: {e}. Make sure it is installed and on PATH.",
                source=source,
            ) from e
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr.decode() if isinstance(e.stderr, bytes) else (e.stderr or "")
            raise RenderError(
                RenderErrorKind.interpreter_failed,
                f"{argv[0]} timed out after {self.config.timeout}s",
                stderr=stderr,
                source=source,
            ) from e

        if result.stdout:
            logger.debug("%s stdout:\n%s", argv[0], result.stdout)

        if result.returncode != 0:
            raise RenderError(
                RenderErrorKind.interpreter_failed,
                f"{argv[0]} exited with code {result.returncode}",
                stderr=result.stderr,
                source=source,
                returncode=result.returncode,
            )

        if not output.is_file():
            raise RenderError(
                RenderErrorKind.artifact_missing,
                f"Diagram image not created at {output}",
                stderr=result.stderr,
                source=source,
                returncode=result.returncode,
            )

        logger.info("rendered %s (%d bytes)", output.name, output.stat().st_size)
        return output
