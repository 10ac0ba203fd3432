"""Resolve publish targets from configuration, once, at process start."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from urllib.parse import quote

from diagrammer.config.models import (
    AzureDevOpsTargetConfig,
    DiagrammerConfig,
    GitHubTargetConfig,
)
from diagrammer.publish.models import PublishTarget, TargetKind

logger = logging.getLogger(__name__)


def resolve_targets(
    config: DiagrammerConfig, env: Mapping[str, str] | None = None
) -> dict[TargetKind, PublishTarget]:
    """Build every target that has enough configuration to be used.

    The local target always resolves. Git targets need a token plus their
    owner/org coordinates, or an explicit ``remote_url``; otherwise they are
    left out and reported as missing when asked for by name.
    """
    env = os.environ if env is None else env
    publish = config.publish
    targets = {
        TargetKind.local: PublishTarget(
            kind=TargetKind.local, destination_path=publish.local.output_dir
        ),
    }

    github = _github_target(publish.github, env, publish.commit_prefix)
    if github is not None:
        targets[TargetKind.github] = github
    else:
        logger.debug("github target not configured")

    azure = _azure_target(publish.azure_devops, env, publish.commit_prefix)
    if azure is not None:
        targets[TargetKind.azure_devops] = azure
    else:
        logger.debug("azure_devops target not configured")

    return targets


def _github_target(
    cfg: GitHubTargetConfig, env: Mapping[str, str], commit_prefix: str
) -> PublishTarget | None:
    token = env.get(cfg.token_env) or None
    if cfg.remote_url:
        remote_url, web_url = cfg.remote_url, None
    elif token and cfg.owner:
        remote_url = f"https://{quote(token, safe='')}@github.com/{cfg.owner}/{cfg.repo}.git"
        web_url = (
            f"https://raw.githubusercontent.com/{cfg.owner}/{cfg.repo}/{cfg.branch}/{{path}}"
        )
    else:
        return None
    return PublishTarget(
        kind=TargetKind.github,
        destination_path=cfg.folder,
        credentials=token,
        remote_url=remote_url,
        branch=cfg.branch,
        author_name=cfg.user_name,
        author_email=cfg.user_email,
        commit_prefix=commit_prefix,
        web_url_template=web_url,
        clone_dir=cfg.clone_dir,
    )


def _azure_target(
    cfg: AzureDevOpsTargetConfig, env: Mapping[str, str], commit_prefix: str
) -> PublishTarget | None:
    token = env.get(cfg.token_env) or None
    if cfg.remote_url:
        remote_url, web_url = cfg.remote_url, None
    elif token and cfg.org and cfg.project:
        base = f"dev.azure.com/{cfg.org}/{cfg.project}/_git/{cfg.repo}"
        remote_url = f"https://{quote(token, safe='')}@{base}"
        web_url = f"https://{base}?path=/{{path}}&version=GB{cfg.branch}"
    else:
        return None
    return PublishTarget(
        kind=TargetKind.azure_devops,
        destination_path=cfg.folder,
        credentials=token,
        remote_url=remote_url,
        branch=cfg.branch,
        author_name=cfg.user_name,
        author_email=cfg.user_email,
        commit_prefix=commit_prefix,
        web_url_template=web_url,
        clone_dir=cfg.clone_dir,
    )
