"""
Hosting document loading and validation.

ConfigLoader reads the YAML hosting document, fills in defaults for the
optional fields and validates the result. Validation collects every problem
in one pass; `load_validated` is the gate the CDK app goes through before any
resource definition is produced.
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from spa_hosting_kit.configs.error_handler import (
    EmptyDocumentError,
    ErrorHandler,
    ParseError,
    ValidationFailure,
)
from spa_hosting_kit.configs.hosting_cfg import (
    CERTIFICATE_REGION,
    DEFAULT_BRANCH,
    DEFAULT_BUILD_COMMAND,
    DEFAULT_INSTALL_COMMAND,
    DEFAULT_NOTIFICATION_EMAIL,
    DEFAULT_OUTPUT_DIRECTORY,
    BuildCfg,
    DomainCfg,
    HostingCfg,
    NotificationCfg,
    SourceCfg,
    ValidationResult,
)
from spa_hosting_kit.logger import get_logger

logger = get_logger(__name__)

PROJECT_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
GITHUB_URL_PATTERN = re.compile(r"https://github\.com/[\w-]+/[\w-]+", re.ASCII)
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Regions supporting CodePipeline, CodeBuild and CodeStar Connections
VALID_REGIONS = frozenset({
    "us-east-1", "us-east-2", "us-west-1", "us-west-2",
    "af-south-1", "ap-east-1", "ap-south-1", "ap-south-2",
    "ap-northeast-1", "ap-northeast-2", "ap-northeast-3",
    "ap-southeast-1", "ap-southeast-2", "ap-southeast-3", "ap-southeast-4",
    "ca-central-1", "eu-central-1", "eu-central-2",
    "eu-west-1", "eu-west-2", "eu-west-3",
    "eu-south-1", "eu-south-2", "eu-north-1",
    "il-central-1", "me-south-1", "me-central-1",
    "sa-east-1",
})

SECTIONS = ("source", "domain", "notification", "build", "tags")


def _matches(pattern: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def _text(section: Mapping[str, Any], key: str, field_name: str, source: Union[str, Path]) -> Optional[str]:
    """Read an optional text field; empty values come back as None."""
    value = section.get(key)
    ErrorHandler.validate_scalar(value, field_name, source)
    if value is None or value == "":
        return None
    return str(value)


class ConfigLoader:
    """
    Loads and validates hosting documents.

    Handles:
    - Reading and parsing the YAML document
    - Applying defaults to optional fields
    - Rule-based validation with errors and warnings
    """

    @staticmethod
    def load(path: Union[str, Path]) -> HostingCfg:
        """
        Load a hosting document and apply defaults.

        The result is not guaranteed to be valid; run `validate` on it.

        Args:
            path: Path to the YAML document

        Returns:
            HostingCfg with defaults applied

        Raises:
            NotFoundError: If the document does not exist
            ParseError: If the YAML is malformed or a section is not a mapping
            EmptyDocumentError: If the document holds nothing
        """
        return ConfigLoader.apply_defaults(ConfigLoader.read_document(path), path)

    @staticmethod
    def read_document(path: Union[str, Path]) -> Mapping[str, Any]:
        """
        Read and parse a hosting document without applying defaults.

        Args:
            path: Path to the YAML document

        Returns:
            The parsed top-level mapping

        Raises:
            NotFoundError: If the document does not exist
            ParseError: If the file cannot be read, the YAML is malformed or the
                top level is not a mapping
            EmptyDocumentError: If the document holds nothing
        """
        ErrorHandler.validate_file_exists(path, "Configuration file")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ParseError(f"YAML parsing error in {path}: {e}") from e
        except OSError as e:
            raise ParseError(f"Cannot read configuration file {path}: {e}") from e

        if not data:
            raise EmptyDocumentError(f"Configuration file is empty: {path}")

        ErrorHandler.validate_mapping(data, "(root)", path)
        logger.info(f"Loaded configuration from {path}")
        return data

    @staticmethod
    def apply_defaults(data: Mapping[str, Any], source: Union[str, Path] = "<document>") -> HostingCfg:
        """
        Build a HostingCfg from a parsed document, filling in defaults.

        Empty values count as absent.

        Args:
            data: Parsed document
            source: Where the document came from, for error messages

        Returns:
            HostingCfg with defaults applied

        Raises:
            ParseError: If a section is present but not a mapping, or a text
                field holds a mapping or a list
        """
        for section in SECTIONS:
            ErrorHandler.validate_mapping(data.get(section), section, source)

        src = data.get("source") or {}
        domain = data.get("domain") or {}
        notification = data.get("notification") or {}
        build = data.get("build") or {}
        tags = data.get("tags") or {}

        email = notification.get("email")
        if not email:
            logger.warning(
                f"notification.email not set in {source}; "
                f"notifications go to fallback address {DEFAULT_NOTIFICATION_EMAIL}"
            )
            email = DEFAULT_NOTIFICATION_EMAIL

        return HostingCfg(
            project_name=data.get("projectName"),
            source=SourceCfg(
                repository_url=src.get("repositoryUrl"),
                branch=_text(src, "branch", "source.branch", source) or DEFAULT_BRANCH,
            ),
            region=data.get("region"),
            domain=DomainCfg(
                custom_domain=_text(domain, "customDomain", "domain.customDomain", source),
                certificate_arn=_text(domain, "certificateArn", "domain.certificateArn", source),
            ),
            notification=NotificationCfg(email=email),
            build=BuildCfg(
                install_command=(
                    _text(build, "installCommand", "build.installCommand", source) or DEFAULT_INSTALL_COMMAND
                ),
                build_command=_text(build, "buildCommand", "build.buildCommand", source) or DEFAULT_BUILD_COMMAND,
                output_directory=(
                    _text(build, "outputDirectory", "build.outputDirectory", source) or DEFAULT_OUTPUT_DIRECTORY
                ),
            ),
            account_id=_text(data, "accountId", "accountId", source),
            tags=tuple((str(k), str(v)) for k, v in tags.items()),
        )

    @staticmethod
    def validate(cfg: HostingCfg) -> ValidationResult:
        """
        Validate a configuration. Never raises.

        Every rule runs regardless of earlier failures.

        Args:
            cfg: Configuration to validate

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not cfg.project_name:
            errors.append("Missing required field: projectName")
        elif not _matches(PROJECT_NAME_PATTERN, cfg.project_name):
            errors.append(
                "Invalid projectName format. Use only alphanumeric characters, hyphens, and underscores."
            )

        url = cfg.source.repository_url
        if not url:
            errors.append("Missing required field: source.repositoryUrl")
        elif not _matches(GITHUB_URL_PATTERN, url):
            errors.append(
                f"Invalid source.repositoryUrl '{url}'. Expected format: https://github.com/owner/repo"
            )

        region = cfg.region
        if not region:
            errors.append("Missing required field: region")
        elif not isinstance(region, str) or region not in VALID_REGIONS:
            errors.append(
                f"Invalid region '{region}'. Must be a valid AWS region that supports "
                "CodePipeline, CodeBuild, and CodeStar Connections."
            )

        if cfg.domain.custom_domain and not cfg.domain.certificate_arn:
            errors.append("domain.certificateArn is required when domain.customDomain is specified")

        if region and region != CERTIFICATE_REGION and cfg.domain.custom_domain:
            warnings.append(
                f"ACM certificates for CloudFront must be created in {CERTIFICATE_REGION}. "
                f"Consider using {CERTIFICATE_REGION} region for custom domain setup."
            )

        email = cfg.notification.email
        if email and not _matches(EMAIL_PATTERN, email):
            errors.append(f"Invalid notification.email format: '{email}'")

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    @staticmethod
    def load_validated(path: Union[str, Path]) -> HostingCfg:
        """
        Load a hosting document and reject it unless it is fully valid.

        Warnings are logged and do not stop the load.

        Raises:
            NotFoundError, ParseError, EmptyDocumentError: From `load`
            ValidationFailure: Carrying every error message
        """
        cfg = ConfigLoader.load(path)
        result = ConfigLoader.validate(cfg)

        for warning in result.warnings:
            logger.warning(warning)

        if not result.valid:
            raise ValidationFailure(result.errors)

        return cfg
