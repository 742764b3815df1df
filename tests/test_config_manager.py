"""Tests for the JSON resource config layer."""
import json

import aws_cdk as cdk
import pytest

from spa_hosting_kit.configs.config_loader import ConfigLoader
from spa_hosting_kit.configs.config_manager import ConfigManager
from spa_hosting_kit.configs.error_handler import NotFoundError


@pytest.fixture
def config_mgr(full_doc):
    stack = cdk.Stack(
        cdk.App(), "Test", env=cdk.Environment(account="123456789012", region="us-east-1")
    )
    return ConfigManager(stack, ConfigLoader.apply_defaults(full_doc))


def test_vars_describe_the_project(config_mgr):
    assert config_mgr.vars["ProjectName"] == "my-app"
    assert config_mgr.vars["AccountId"] == "123456789012"
    assert config_mgr.vars["Region"] == "us-east-1"
    assert config_mgr.vars["Branch"] == "release"
    assert config_mgr.vars["PipelineName"] == "my-app-hosting-pipeline"
    assert config_mgr.vars["GithubOwner"] == "acme"
    assert config_mgr.vars["GithubRepo"] == "site"


def test_expand_placeholders_recurses(config_mgr):
    data = {
        "name": "${ProjectName}-fn",
        "list": ["${Region}", 5, {"nested": "${Branch}"}],
        "unknown": "${NotAVar}",
    }

    out = config_mgr.expand_placeholders(data)

    assert out == {
        "name": "my-app-fn",
        "list": ["us-east-1", 5, {"nested": "release"}],
        "unknown": "${NotAVar}",
    }


def test_load_json_merges_extra_vars(config_mgr, tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps({"Resource": "${TopicArn}", "Project": "${ProjectName}"}))

    out = config_mgr.load_json(path, extra_vars={"TopicArn": "arn:aws:sns:us-east-1:1:t"})

    assert out == {"Resource": "arn:aws:sns:us-east-1:1:t", "Project": "my-app"}


def test_load_json_missing_file(config_mgr, tmp_path):
    with pytest.raises(NotFoundError):
        config_mgr.load_json(tmp_path / "missing.json")


def test_unknown_config_type(config_mgr):
    with pytest.raises(ValueError):
        config_mgr.get_config_path("tables")


def test_bundled_lambda_dirs_are_discovered(config_mgr):
    names = [d.name for d in config_mgr.find_lambda_dirs()]

    assert names == ["invalidate_cache", "notify_deployment", "trigger_pipeline"]


def test_lambda_folder_configs_merge_in_order(config_mgr, tmp_path):
    folder = tmp_path / "lambda_src" / "worker"
    folder.mkdir(parents=True)
    (folder / "app.py").write_text("def handler(event, context):\n    return {}\n")
    (folder / "config.base.json").write_text(json.dumps({"timeout": 5, "env": {"A": "${ProjectName}"}}))
    (folder / "config.override.json").write_text(json.dumps({"timeout": 20}))

    dirs = config_mgr.find_lambda_dirs(tmp_path / "lambda_src")
    conf = config_mgr.load_lambda_config_from_folder(dirs[0], extra_vars={"Extra": "x"})

    assert conf["name"] == "worker"
    assert conf["timeout"] == 20
    assert conf["env"] == {"A": "my-app"}
    assert conf["runtime"] == "python3.12"
    assert conf["handler"] == "app.handler"
    assert conf["code_path"] == str(folder.resolve())


def test_resolve_policy_file_prefers_local_folder(config_mgr, tmp_path):
    local = tmp_path / "invalidate_cache.json"
    local.write_text("{}")

    assert config_mgr.resolve_policy_file("invalidate_cache.json", tmp_path) == local
    assert config_mgr.resolve_policy_file("invalidate_cache.json") == config_mgr.get_config_path(
        "policies", "invalidate_cache.json"
    )
    assert config_mgr.resolve_policy_file(None) is None
