#!/usr/bin/env python3
"""
Validate SPA Hosting Kit configuration files.

Each file is checked in three passes: it must load (exists, parses, is not
empty), it must match schema/hosting.schema.json (catches unknown keys and
wrong types), and it must pass the hosting validation rules. Designed to run
as a pre-commit hook or before `cdk deploy`.
"""

import argparse
import json
import sys
from pathlib import Path

from jsonschema import Draft202012Validator

from spa_hosting_kit.configs.config_loader import ConfigLoader
from spa_hosting_kit.configs.error_handler import HostingConfigError
from spa_hosting_kit.pipeline.buildspec_generator import BuildSpecGenerator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SCHEMA = PROJECT_ROOT / "schema" / "hosting.schema.json"


def load_json(path: Path) -> dict:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_file(config_file: Path, validator: Draft202012Validator, show_buildspec: bool = False) -> bool:
    """Validate one hosting document, printing the result. Returns True if it is valid."""
    try:
        data = ConfigLoader.read_document(config_file)
        cfg = ConfigLoader.apply_defaults(data, config_file)
    except HostingConfigError as e:
        print(f"[X] {config_file}: {e}")
        return False

    errors = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        path = "/".join(map(str, error.path)) or "(root)"
        errors.append(f"{path}: {error.message}")

    result = ConfigLoader.validate(cfg)
    errors.extend(result.errors)

    if errors:
        print(f"[X] {config_file}: {len(errors)} error(s)")
        for error in errors:
            print(f"  - {error}")
    else:
        print(f"[OK] {config_file}: OK")

    for warning in result.warnings:
        print(f"  ! {warning}")

    if show_buildspec and not errors:
        print(BuildSpecGenerator.generate(cfg).to_yaml())

    return not errors


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Validate SPA Hosting Kit configuration files")
    ap.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA, help="JSON schema to lint against")
    ap.add_argument("--buildspec", action="store_true", help="Print the generated buildspec for valid files")
    ap.add_argument("files", nargs="+", type=Path)
    args = ap.parse_args(argv)

    validator = Draft202012Validator(load_json(args.schema))

    all_valid = True
    for config_file in args.files:
        if not validate_file(config_file, validator, args.buildspec):
            all_valid = False

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
