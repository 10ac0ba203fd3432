"""Shared test fixtures for diagrammer."""

import shutil
import subprocess
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from diagrammer.config.models import DiagrammerConfig, RenderConfig, RenderProfile
from diagrammer.llm.base import LLMProvider
from diagrammer.llm.models import LLMConfig, LLMResponse, TokenUsage
from diagrammer.render.renderer import Renderer
from diagrammer.spec.models import DiagramSpecification
from diagrammer.workspace.store import ArtifactStore

# A stand-in for a diagrams script: writes "<filename>.png" like diagrams does.
FAKE_DIAGRAM_SCRIPT = '''\
filename = "OUTPUT_PATH"
label = "Web
Tier"
with open(filename + ".png", "wb") as fh:
    fh.write(b"\\x89PNG fake " + label.encode())
'''


@pytest.fixture
def sample_spec():
    return DiagramSpecification(
        name="web-app",
        title="Web App",
        description="Three tier web application",
        source_code=FAKE_DIAGRAM_SCRIPT,
        style="azure",
        quality="standard",
    )


@pytest.fixture
def python_render_config():
    """Render programs with the running interpreter instead of python3."""
    return RenderConfig(
        program=RenderProfile(command=[sys.executable, "{source}"], source_ext="py"),
        timeout=60,
    )


@pytest.fixture
def store(tmp_path, python_render_config):
    return ArtifactStore(tmp_path / "workspace", Renderer(python_render_config))


@pytest.fixture
def mock_llm_provider():
    provider = MagicMock(spec=LLMProvider)
    provider.config = LLMConfig(provider="anthropic", model="test-model")
    provider.generate = AsyncMock(
        return_value=LLMResponse(
            content='{"name": "x", "title": "T", "description": "d", "source_code": "print(1)"}',
            usage=TokenUsage(input_tokens=100, output_tokens=250),
            model="test-model",
        )
    )
    return provider


@pytest.fixture
def sample_config():
    return DiagrammerConfig()


def _git(*args, cwd=None):
    subprocess.run(
        ["git", "-c", "user.name=Seed", "-c", "user.email=seed@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def bare_remote(tmp_path) -> Path:
    """A local bare repository with one commit on ``main``."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    remote = tmp_path / "remote.git"
    seed = tmp_path / "seed"
    _git("init", "--bare", str(remote))
    _git("init", str(seed))
    _git("symbolic-ref", "HEAD", "refs/heads/main", cwd=seed)
    (seed / "README.md").write_text("diagrams\n")
    _git("add", "README.md", cwd=seed)
    _git("commit", "-m", "init", cwd=seed)
    _git("remote", "add", "origin", str(remote), cwd=seed)
    _git("push", "origin", "main", cwd=seed)
    return remote
