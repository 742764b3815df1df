"""Shared fixtures for the SPA Hosting Kit tests."""
import copy
import importlib.util
import textwrap
from pathlib import Path

import pytest
import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LAMBDA_ROOT = PROJECT_ROOT / "spa_hosting_kit" / "lambda_src"

MINIMAL_DOC = {
    "projectName": "my-app",
    "source": {"repositoryUrl": "https://github.com/acme/site"},
    "region": "us-east-1",
}

FULL_DOC = {
    "projectName": "my-app",
    "accountId": "123456789012",
    "source": {"repositoryUrl": "https://github.com/acme/site", "branch": "release"},
    "region": "us-east-1",
    "domain": {
        "customDomain": "www.example.com",
        "certificateArn": "arn:aws:acm:us-east-1:123456789012:certificate/abcd-1234",
    },
    "notification": {"email": "team@example.com"},
    "build": {
        "installCommand": "yarn install --frozen-lockfile",
        "buildCommand": "yarn build",
        "outputDirectory": "build",
    },
    "tags": {"Environment": "production"},
}


@pytest.fixture
def write_config(tmp_path):
    """Write a hosting document (dict or raw YAML text) and return its path."""
    def _write(doc, name="config.yml"):
        path = tmp_path / name
        if isinstance(doc, str):
            path.write_text(textwrap.dedent(doc), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(doc), encoding="utf-8")
        return path
    return _write


def load_module(path: Path, name: str):
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def load_handler():
    """Import a Lambda handler module from lambda_src/<name>/app.py."""
    def _load(name):
        return load_module(LAMBDA_ROOT / name / "app.py", f"lambda_{name}_app")
    return _load


@pytest.fixture
def minimal_doc():
    return copy.deepcopy(MINIMAL_DOC)


@pytest.fixture
def full_doc():
    return copy.deepcopy(FULL_DOC)
