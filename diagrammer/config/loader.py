"""Locate, read and validate diagrammer.yaml."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import DiagrammerConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG = Path("diagrammer.yaml")
USER_CONFIG = Path(".diagrammer") / "config.yaml"

_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def _search_paths(cli_path: str | None) -> list[Path]:
    if cli_path:
        explicit = Path(cli_path)
        if not explicit.exists():
            raise ValueError(f"Config file not found: {cli_path}")
        return [explicit]
    return [PROJECT_CONFIG, Path.home() / USER_CONFIG]


def load_config(cli_path: str | None = None) -> DiagrammerConfig:
    """Return the first config found, else defaults.

    Lookup order: ``cli_path`` (must exist), ./diagrammer.yaml,
    ~/.diagrammer/config.yaml. An empty file counts as absent.
    """
    for path in _search_paths(cli_path):
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        try:
            config = DiagrammerConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("loaded config from %s", path)
        return config

    return DiagrammerConfig()


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string value; unset variables become ""."""
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


# Default YAML template for `diagrammer config init`
DEFAULT_CONFIG_TEMPLATE = """\
# diagrammer.yaml

# Model call
llm:
  provider: "anthropic"        # anthropic | openai
  model: "claude-sonnet-4-5-20250929"
  api_key_env: "ANTHROPIC_API_KEY"
  max_tokens: 8192

# Staging area (spec.json, source.<ext>, artifact.<ext>)
workspace:
  directory: ".diagrammer/workspace"

# Interpreters, one profile per output kind
render:
  program:
    command: ["python3", "{source}"]
    source_ext: "py"
    artifact_ext: "png"
    output_stem: "render"
  markup:
    command: ["plantuml", "-tpng", "{source}"]
    source_ext: "puml"
    artifact_ext: "png"
    output_stem: "source"
  # timeout: 120

# Publish targets. Tokens are read from the named environment variables.
publish:
  commit_prefix: "docs(diagrams): update architecture diagrams"
  local:
    output_dir: "./output"
  github:
    token_env: "GITHUB_TOKEN"
    owner: "${GITHUB_OWNER}"
    repo: "diagrams"
    branch: "main"
    folder: "images"
    user_name: "Diagram Bot"
    user_email: "diagrams@example.com"
  azure_devops:
    token_env: "AZDO_TOKEN"
    org: "${AZDO_ORG}"
    project: "${AZDO_PROJECT}"
    repo: "diagrams"
    branch: "main"
    folder: "images"

# Logging
log_level: "info"              # debug | info | warn | error
"""
