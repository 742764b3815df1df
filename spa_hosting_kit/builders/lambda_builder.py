"""
Lambda function builders for the SPA Hosting Kit.

This module builds the stack's helper functions (cache invalidation,
deployment notification, initial pipeline trigger) from per-folder JSON
configs under lambda_src/. Each folder holds an app.py handler plus one or
more config*.json files describing runtime, memory, timeout, environment and
the IAM policy file to attach.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional
from aws_cdk import Duration, Tags
from aws_cdk import aws_lambda as _lambda
from constructs import Construct
from spa_hosting_kit.configs.config_manager import ConfigManager
from spa_hosting_kit.builders.policy_builder import apply_policies_to_role
from spa_hosting_kit.configs.error_handler import ErrorHandler, ValidationDecorators

ASSET_EXCLUDES = ["config*.json", "__pycache__", "*.pyc"]

def runtime_from(s: str) -> _lambda.Runtime:
    """
    Convert string to Lambda runtime enum.

    Raises:
        ValueError: If runtime string is not supported
    """
    s = (s or "python3.12").lower()
    m = {
        "python3.12": _lambda.Runtime.PYTHON_3_12,
        "python3.11": _lambda.Runtime.PYTHON_3_11,
        "python3.10": _lambda.Runtime.PYTHON_3_10,
    }
    ErrorHandler.validate_enum_value(s, list(m.keys()), "runtime", "Lambda")
    return m[s]

@ValidationDecorators.validate_required_config_fields(
    ["code_path", "runtime", "handler", "memory", "timeout"],
    context="Lambda"
)
def build_lambda_function(
        scope: Construct,
        logical_name: str,
        conf: dict
    ) -> _lambda.Function:
    """
    Build a Lambda function from configuration.

    Args:
        scope: CDK construct scope
        logical_name: Logical name for the function
        conf: Lambda configuration dictionary

    Returns:
        Lambda function instance
    """
    fn = _lambda.Function(
        scope,
        f"Fn-{logical_name}",
        function_name=conf.get("function_name"),
        runtime=runtime_from(conf["runtime"]),
        handler=conf["handler"],
        code=_lambda.Code.from_asset(conf["code_path"], exclude=ASSET_EXCLUDES),
        memory_size=int(conf["memory"]),
        timeout=Duration.seconds(int(conf["timeout"])),
        environment={k: str(v) for k, v in (conf.get("env") or {}).items()},
        description=conf.get("description"),
    )

    for k, v in (conf.get("tags") or {}).items():
        Tags.of(fn).add(k, v)

    return fn

class LambdaFleet(Construct):
    """
    Discovers lambda folders under `code_root` and builds each function using
    the config*.json files inside each folder. Example:

      lambda_src/invalidate_cache/app.py
      lambda_src/invalidate_cache/config.json

    Merge order is lexicographic; later files override earlier ones.
    Placeholders in the configs and in the referenced policy files are
    expanded with the stack vars plus `extra_vars` (resource ARNs, names).
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            config_mgr: ConfigManager,
            extra_vars: Optional[Dict[str, str]] = None,
            code_root: Optional[Path] = None,
        ) -> None:
        super().__init__(scope, construct_id)

        self.functions: Dict[str, _lambda.Function] = {}

        for folder in config_mgr.find_lambda_dirs(code_root):
            conf = config_mgr.load_lambda_config_from_folder(folder, extra_vars=extra_vars)
            logical_name = conf["name"]

            fn = build_lambda_function(self, logical_name, conf)

            policy_file = conf.get("policy_file")
            if policy_file:
                apply_policies_to_role(
                    fn.role,
                    policy_file,
                    config_mgr,
                    extra_vars=extra_vars,
                    base_folder=folder,
                )

            self.functions[logical_name] = fn
