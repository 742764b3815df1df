"""
IAM policy builders for the SPA Hosting Kit.

This module applies IAM policies described in JSON files to roles. Policy
files live under configs/iam/policies/ (or next to a Lambda handler) and may
reference ${Var} placeholders such as ${DistributionArn} or ${PipelineArn},
which are expanded before the statements are built.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
from aws_cdk import aws_iam as iam
from spa_hosting_kit.configs.config_manager import ConfigManager
from spa_hosting_kit.configs.error_handler import ErrorHandler

def _ensure_list(obj: Any) -> List[Any]:
    if isinstance(obj, list):
        return obj
    return [obj]

def _attach_inline(
        role: iam.IRole,
        name: str,
        statements: list[dict]
    ) -> None:
    """
    Attach inline policy to a role.

    Args:
        role: IAM role to attach policy to
        name: Name of the inline policy
        statements: List of IAM policy statements
    """
    doc = iam.PolicyDocument(
        statements=[iam.PolicyStatement.from_json(s) for s in statements]
    )
    iam.Policy(
        role,
        f"Inline-{name}",
        document=doc,
        roles=[role]
    )

def _validate_config(raw: dict) -> None:
    """
    Validate policy configuration structure.

    Raises:
        ValueError: If configuration structure is invalid
        TypeError: If a section has the wrong type
    """
    ErrorHandler.validate_type(raw, dict, "policy config", "Policy")

    allowed = {"inline"}
    extra = set(raw.keys()) - allowed
    if extra:
        raise ValueError(f"Unknown keys in policy config: {', '.join(sorted(extra))}")

    inline = raw.get("inline", {})
    ErrorHandler.validate_type(inline, dict, "inline", "Policy")

    for name, stmts in inline.items():
        ErrorHandler.validate_string_not_empty(name, "inline policy name", "Policy")
        lst = _ensure_list(stmts)
        ErrorHandler.validate_list_not_empty(lst, f"inline policy '{name}'", "Policy")

        for i, s in enumerate(lst):
            ErrorHandler.validate_type(s, dict, f"statement #{i} in '{name}'", "Policy")
            ErrorHandler.validate_required_fields(s, ["Effect", "Action"], f"Statement #{i} in '{name}'")

            if "Resource" not in s and "NotResource" not in s:
                raise ValueError(
                    f"Statement #{i} in '{name}' must include Resource or NotResource"
                )

def apply_policies_to_role(
        role: iam.IRole,
        filename: str,
        config_mgr: ConfigManager,
        extra_vars: Optional[Dict[str, str]] = None,
        base_folder: Optional[Path] = None,
    ) -> None:
    """
    Apply inline policies from a JSON file to a role.

    The JSON file should have this structure:
    {
      "inline": {
        "InvalidateDistribution": [
          {
            "Effect": "Allow",
            "Action": ["cloudfront:CreateInvalidation"],
            "Resource": ["${DistributionArn}"]
          }
        ]
      }
    }

    Args:
        role: IAM role to apply policies to
        filename: Policy config filename
        config_mgr: Config manager supplying paths and placeholder variables
        extra_vars: Variables added on top of the stack vars
        base_folder: Folder checked for the policy file before configs/iam/policies

    Raises:
        ValueError: If policy configuration is invalid
        NotFoundError: If policy file is not found
    """
    policy_path = config_mgr.resolve_policy_file(filename, base_folder)
    raw = config_mgr.load_json(policy_path, extra_vars=extra_vars)

    _validate_config(raw)

    for name, statements in raw.get("inline", {}).items():
        _attach_inline(role, name, _ensure_list(statements))
