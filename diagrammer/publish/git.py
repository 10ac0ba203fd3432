"""GitPublisher: commits an artifact into a remote branch via the git CLI.

Each publish works in its own throw-away shallow clone:

    clone --depth 1 → set author → write file → add -A → status
        → (no changes: stop, committed=False) → commit → push

The clone directory is removed whatever happens. Concurrent pushes to
the same branch are not retried; the losing push fails with push_failed.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from diagrammer.publish.local import artifact_filename
from diagrammer.publish.models import (
    PublishError,
    PublishErrorKind,
    PublishResult,
    PublishTarget,
)
from diagrammer.spec.models import DiagramSpecification

logger = logging.getLogger(__name__)


class GitPublisher:
    """Publishes to one git-backed target (GitHub or Azure DevOps)."""

    def __init__(self, target: PublishTarget, git: str = "git") -> None:
        self.target = target
        self.git = git

    def publish(
        self, spec: DiagramSpecification, data: bytes, *, ext: str = "png"
    ) -> PublishResult:
        if not self.target.remote_url:
            raise PublishError(
                PublishErrorKind.missing_config, self.target.kind, "no remote configured"
            )

        folder = self.target.destination_path.strip("/")
        filename = artifact_filename(spec, ext)
        path_in_repo = f"{folder}/{filename}" if folder else filename

        clone_dir = self._fresh_clone_dir()
        try:
            self._clone(clone_dir)
            self._run(clone_dir, "config", "user.name", self.target.author_name)
            self._run(clone_dir, "config", "user.email", self.target.author_email)

            dest = clone_dir / path_in_repo
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)

            self._run(clone_dir, "add", "-A")
            status = self._run(clone_dir, "status", "--porcelain").stdout
            committed = bool(status.strip())
            if committed:
                timestamp = datetime.now(timezone.utc).isoformat()
                message = f"{self.target.commit_prefix}: {spec.title} [{timestamp}]"
                self._run(clone_dir, "commit", "-m", message)
                self._run(clone_dir, "push", "origin", self.target.branch)
                logger.info("pushed %s to %s", path_in_repo, self.target.kind.value)
            else:
                logger.info("%s: no changes to commit", self.target.kind.value)
        finally:
            shutil.rmtree(clone_dir, ignore_errors=True)

        return PublishResult(
            target_kind=self.target.kind,
            resolved_locator=self.locator(path_in_repo),
            committed=committed,
            path_in_repo=path_in_repo,
        )

    def locator(self, path_in_repo: str) -> str:
        template = self.target.web_url_template
        if not template:
            return path_in_repo
        return template.replace("{path}", path_in_repo)

    # -- git plumbing ------------------------------------------------------

    def _fresh_clone_dir(self) -> Path:
        if self.target.clone_dir:
            path = Path(self.target.clone_dir)
            if path.exists():
                logger.debug("removing stale clone %s", path)
                shutil.rmtree(path)
            return path
        return Path(tempfile.mkdtemp(prefix=f"diagrammer-{self.target.kind.value}-"))

    def _clone(self, clone_dir: Path) -> None:
        logger.info("cloning %s (branch %s)", self.target.kind.value, self.target.branch)
        args = [
            "clone", "--depth", "1", "--branch", self.target.branch,
            self.target.remote_url, str(clone_dir),
        ]
        self._run(None, *args, failure=PublishErrorKind.clone_failed)

    def _run(
        self,
        cwd: Path | None,
        *args: str,
        failure: PublishErrorKind = PublishErrorKind.push_failed,
    ) -> subprocess.CompletedProcess[str]:
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        try:
            result = subprocess.run(
                [self.git, *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                env=env,
            )
        except FileNotFoundError as e:
            raise PublishError(
                failure, self.target.kind, f"{self.git!r} not found: {e}"
            ) from e

        if result.returncode != 0:
            detail = self._redact(result.stderr.strip() or result.stdout.strip())
            raise PublishError(
                failure,
                self.target.kind,
                f"git {args[0]} exited {result.returncode}: {detail}",
            )
        return result

    def _redact(self, text: str) -> str:
        token = self.target.credentials
        if not token:
            return text
        for secret in {token, quote(token, safe="")}:
            text = text.replace(secret, "***")
        return text
