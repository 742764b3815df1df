"""Tests for the CDK app entry point."""
from unittest.mock import patch

import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from spa_hosting_kit.app import STACK_ID, build_app, main
from spa_hosting_kit.configs.error_handler import NotFoundError, ValidationFailure
from spa_hosting_kit.configs.hosting_cfg import DEFAULT_CONFIG_PATH
from spa_hosting_kit.stacks.spa_hosting_stack import SpaHostingStack


def _stacks(app):
    return [c for c in app.node.children if isinstance(c, cdk.Stack)]


def test_valid_config_builds_stack(write_config, full_doc):
    app = cdk.App(context={"config": str(write_config(full_doc))})

    stack = build_app(app)

    assert isinstance(stack, SpaHostingStack)
    assert stack.node.id == STACK_ID
    assert stack.region == "us-east-1"
    assert stack.account == "123456789012"
    assert _stacks(app) == [stack]


def test_invalid_config_builds_nothing(write_config, minimal_doc):
    minimal_doc["domain"] = {"customDomain": "example.com"}
    app = cdk.App(context={"config": str(write_config(minimal_doc))})

    with pytest.raises(ValidationFailure) as exc:
        build_app(app)

    assert exc.value.errors == ["domain.certificateArn is required when domain.customDomain is specified"]
    assert _stacks(app) == []


def test_missing_config_builds_nothing(tmp_path):
    app = cdk.App(context={"config": str(tmp_path / "absent.yml")})

    with pytest.raises(NotFoundError):
        build_app(app)

    assert _stacks(app) == []


def test_numeric_branch_builds_stack(write_config):
    path = write_config("""
        projectName: my-app
        region: us-east-1
        source:
          repositoryUrl: https://github.com/acme/site
          branch: 2024
    """)
    app = cdk.App(context={"config": str(path)})

    stack = build_app(app)

    pipeline = next(iter(Template.from_stack(stack).find_resources("AWS::CodePipeline::Pipeline").values()))
    source_action = pipeline["Properties"]["Stages"][0]["Actions"][0]
    assert source_action["Configuration"]["BranchName"] == "2024"


def test_main_exits_on_unreadable_config(tmp_path, write_config, minimal_doc, monkeypatch):
    (tmp_path / "config").mkdir()
    write_config(minimal_doc, name=DEFAULT_CONFIG_PATH)
    monkeypatch.chdir(tmp_path)

    with patch(
        "spa_hosting_kit.configs.config_loader.open",
        side_effect=PermissionError(13, "Permission denied"),
        create=True,
    ):
        with pytest.raises(SystemExit) as exc:
            main()

    assert exc.value.code == 1
