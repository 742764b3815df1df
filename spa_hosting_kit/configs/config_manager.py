from __future__ import annotations
import json, re
from pathlib import Path
from typing import Any, Mapping, Dict, List, Optional
from aws_cdk import Stack
from spa_hosting_kit.configs.error_handler import ErrorHandler
from spa_hosting_kit.configs.hosting_cfg import HostingCfg

_VAR = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


class ConfigManager:
    """
    JSON resource configuration for the SPA Hosting Kit stack.

    Handles:
    - Path resolution for the config types (IAM policies, Lambda folders)
    - JSON file loading with ${Var} placeholder expansion
    - Lambda folder discovery and per-folder config merging

    The hosting document itself (YAML) is handled by ConfigLoader.
    """

    CONFIG_ROOT = PACKAGE_ROOT / "configs"
    LAMBDA_ROOT = PACKAGE_ROOT / "lambda_src"

    CONFIG_PATHS = {
        "policies": "iam/policies",
    }

    LAMBDA_DEFAULTS = {
        "runtime": "python3.12",
        "memory": 128,
        "timeout": 10,
        "handler": "app.handler",
    }

    def __init__(self, stack: Stack, cfg: HostingCfg):
        self.stack = stack
        self.cfg = cfg
        self.vars = cfg.vars(stack)

    def get_config_path(self, config_type: str, filename: str = None) -> Path:
        """
        Get the full path to a config file.

        Args:
            config_type: Type of config (policies)
            filename: Optional filename, if None returns the directory path

        Returns:
            Full path to the config file or directory
        """
        ErrorHandler.validate_enum_value(config_type, list(self.CONFIG_PATHS), "config_type", "ConfigManager")

        base_path = self.CONFIG_ROOT / self.CONFIG_PATHS[config_type]
        if filename:
            return base_path / filename
        return base_path

    def expand_placeholders(self, obj: Any, vars: Mapping[str, str] = None) -> Any:
        """
        Recursively expand ${VAR} placeholders in strings, lists, and dicts.

        Unknown placeholders are left as they are.

        Args:
            obj: Object to expand placeholders in
            vars: Variables to substitute (uses stack vars if None)

        Returns:
            Object with placeholders expanded
        """
        if vars is None:
            vars = self.vars

        if isinstance(obj, str):
            return _VAR.sub(lambda m: str(vars.get(m.group(1), m.group(0))), obj)
        if isinstance(obj, list):
            return [self.expand_placeholders(x, vars) for x in obj]
        if isinstance(obj, dict):
            return {k: self.expand_placeholders(v, vars) for k, v in obj.items()}
        return obj

    def load_json(self, filepath: Path, expand_vars: bool = True, extra_vars: Dict[str, str] = None) -> dict:
        """
        Load and parse a JSON file, optionally expanding placeholders.

        Args:
            filepath: Path to the JSON file
            expand_vars: Whether to expand placeholders in the loaded JSON
            extra_vars: Variables added on top of the stack vars

        Returns:
            Parsed JSON as dict
        """
        ErrorHandler.validate_file_exists(filepath, "Config file")

        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        if expand_vars:
            data = self.expand_placeholders(data, self._merged_vars(extra_vars))

        return data

    def find_lambda_dirs(self, code_root: Optional[Path] = None) -> List[Path]:
        """
        Find all lambda directories that contain app.py.

        Args:
            code_root: Root directory to search in (defaults to the bundled lambda_src)

        Returns:
            List of Path objects for lambda directories, sorted by name
        """
        root = Path(code_root) if code_root else self.LAMBDA_ROOT
        ErrorHandler.validate_path_exists(root, "Lambda root")

        return [
            d for d in sorted(p for p in root.iterdir() if p.is_dir())
            if (d / "app.py").is_file()
        ]

    def load_lambda_config_from_folder(self, folder: Path, extra_vars: Dict[str, str] = None) -> dict:
        """
        Load and merge all config*.json files from a lambda folder.

        Files merge in lexicographic order (later files override earlier ones),
        then defaults are filled in and placeholders expanded.

        Args:
            folder: Lambda folder path
            extra_vars: Additional variables for placeholder expansion

        Returns:
            Merged lambda configuration
        """
        conf: dict = {}
        for cf in sorted(folder.glob("config*.json")):
            conf.update(self.load_json(cf, expand_vars=False))

        conf.setdefault("name", folder.name)
        for key, value in self.LAMBDA_DEFAULTS.items():
            conf.setdefault(key, value)

        conf["code_path"] = str(folder.resolve())

        return self.expand_placeholders(conf, self._merged_vars(extra_vars))

    def resolve_policy_file(self, policy_file: Optional[str], base_folder: Path = None) -> Optional[Path]:
        """
        Resolve a policy file path, checking the local folder first, then configs.

        Args:
            policy_file: Policy file name or path
            base_folder: Base folder to check for local policy files

        Returns:
            Resolved policy file path or None
        """
        if not policy_file:
            return None

        p = Path(policy_file)

        if not p.is_absolute():
            if base_folder:
                local = base_folder / policy_file
                if local.is_file():
                    return local

            alt = self.get_config_path("policies", policy_file)
            if alt.is_file():
                return alt

        return p

    def _merged_vars(self, extra_vars: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(self.vars)
        if extra_vars:
            merged.update({k: str(v) for k, v in extra_vars.items()})
        return merged
