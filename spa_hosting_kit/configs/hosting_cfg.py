"""
Hosting configuration model for the SPA Hosting Kit.

This module provides the value objects a hosting document is loaded into,
the defaults applied to optional fields, and helpers to read the validated
configuration from CDK context and expose it as placeholder variables for the
JSON resource configs.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
from aws_cdk import App, Stack
from functools import lru_cache

DEFAULT_CONFIG_PATH = "config/config.yml"
DEFAULT_BRANCH = "main"
DEFAULT_INSTALL_COMMAND = "npm ci"
DEFAULT_BUILD_COMMAND = "npm run build"
DEFAULT_OUTPUT_DIRECTORY = "dist"
# Used when the document names no notification address (see DESIGN.md)
DEFAULT_NOTIFICATION_EMAIL = "maintainer@example.com"

CERTIFICATE_REGION = "us-east-1"

_REPO_PARTS = re.compile(r"github\.com/([^/]+)/([^/]+)$")


@dataclass(frozen=True)
class SourceCfg:
    """
    GitHub source settings.

    Attributes:
        repository_url: https://github.com/{owner}/{repo}
        branch: Branch the pipeline tracks
    """
    repository_url: Optional[str]
    branch: str = DEFAULT_BRANCH

    def _parts(self) -> Optional[re.Match]:
        if not isinstance(self.repository_url, str):
            return None
        return _REPO_PARTS.search(self.repository_url)

    @property
    def owner(self) -> Optional[str]:
        m = self._parts()
        return m.group(1) if m else None

    @property
    def repo(self) -> Optional[str]:
        m = self._parts()
        return m.group(2) if m else None


@dataclass(frozen=True)
class DomainCfg:
    custom_domain: Optional[str] = None
    certificate_arn: Optional[str] = None


@dataclass(frozen=True)
class NotificationCfg:
    email: Optional[str] = DEFAULT_NOTIFICATION_EMAIL


@dataclass(frozen=True)
class BuildCfg:
    install_command: str = DEFAULT_INSTALL_COMMAND
    build_command: str = DEFAULT_BUILD_COMMAND
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY


@dataclass(frozen=True)
class HostingCfg:
    """
    Main hosting configuration container.

    Attributes:
        project_name: Namespace key for every derived resource name
        source: GitHub source settings
        region: AWS region to deploy into
        domain: Optional custom domain settings
        notification: Notification settings
        build: Build commands and output directory
        account_id: Optional AWS account ID
        tags: User-defined tags applied to every resource, as (key, value) pairs
    """
    project_name: Optional[str]
    source: SourceCfg
    region: Optional[str]
    domain: DomainCfg = field(default_factory=DomainCfg)
    notification: NotificationCfg = field(default_factory=NotificationCfg)
    build: BuildCfg = field(default_factory=BuildCfg)
    account_id: Optional[str] = None
    tags: Tuple[Tuple[str, str], ...] = ()

    @property
    def pipeline_name(self) -> str:
        return f"{self.project_name}-hosting-pipeline"

    @property
    def connection_name(self) -> str:
        return f"{self.project_name}-github"

    @property
    def topic_name(self) -> str:
        return f"{self.project_name}-hosting-notifications"

    def vars(
            self,
            stack: Stack,
            extra: dict[str, str] | None = None
        ) -> dict[str, str]:
        """
        Generate placeholder variables for JSON configuration expansion.

        Args:
            stack: CDK stack instance
            extra: Additional variables to include

        Returns:
            Dictionary of variable name to value mappings
        """
        base = {
            "ProjectName": self.project_name,
            "AccountId": stack.account or self.account_id,
            "Region": stack.region or self.region,
            "Partition": stack.partition,
            "Branch": self.source.branch,
            "PipelineName": self.pipeline_name,
        }
        if self.source.owner:
            base["GithubOwner"] = self.source.owner
            base["GithubRepo"] = self.source.repo
        if extra:
            base.update({k: str(v) for k, v in extra.items()})

        return base


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a HostingCfg.

    Attributes:
        valid: True when no rule produced an error
        errors: Error messages, in rule order
        warnings: Non-fatal warnings, in rule order
    """
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _node(obj: Union[App, Stack]):
    return (obj if isinstance(obj, App) else Stack.of(obj)).node


@lru_cache(maxsize=1)
def get_cfg(obj: Union[App, Stack]) -> HostingCfg:
    """
    Load the validated hosting configuration named by CDK context.

    The document path comes from `-c config=...` (or cdk.json), falling back
    to config/config.yml.

    Args:
        obj: CDK App or Stack instance

    Returns:
        Validated hosting configuration

    Raises:
        NotFoundError, ParseError, EmptyDocumentError: If the document cannot be loaded
        ValidationFailure: If any validation rule fails
    """
    from spa_hosting_kit.configs.config_loader import ConfigLoader

    config_path = _node(obj).try_get_context("config") or DEFAULT_CONFIG_PATH
    return ConfigLoader.load_validated(config_path)
