"""Tests for attaching JSON-described IAM policies to roles."""
import json

import aws_cdk as cdk
import pytest
from aws_cdk import aws_iam as iam
from aws_cdk.assertions import Template

from spa_hosting_kit.builders.policy_builder import apply_policies_to_role
from spa_hosting_kit.configs.config_loader import ConfigLoader
from spa_hosting_kit.configs.config_manager import ConfigManager


@pytest.fixture
def stack():
    return cdk.Stack(cdk.App(), "Test", env=cdk.Environment(account="123456789012", region="us-east-1"))


@pytest.fixture
def role(stack):
    return iam.Role(stack, "Role", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))


@pytest.fixture
def config_mgr(stack, minimal_doc):
    return ConfigManager(stack, ConfigLoader.apply_defaults(minimal_doc))


def test_bundled_policy_attaches_inline_statements(stack, role, config_mgr):
    apply_policies_to_role(
        role,
        "trigger_pipeline.json",
        config_mgr,
        extra_vars={"PipelineArn": "arn:aws:codepipeline:us-east-1:123456789012:my-app-hosting-pipeline",
                    "ConnectionArn": "arn:aws:codeconnections:us-east-1:123456789012:connection/abc"},
    )

    policies = Template.from_stack(stack).find_resources("AWS::IAM::Policy")
    assert len(policies) == 2
    rendered = json.dumps(policies)
    assert "arn:aws:codepipeline:us-east-1:123456789012:my-app-hosting-pipeline" in rendered
    assert "${" not in rendered


def test_unknown_policy_section_is_rejected(role, config_mgr, tmp_path):
    policy = tmp_path / "extra.json"
    policy.write_text(json.dumps({
        "managed": ["service-role/AWSLambdaBasicExecutionRole"],
        "inline": {},
    }))

    with pytest.raises(ValueError, match="Unknown keys in policy config: managed"):
        apply_policies_to_role(role, "extra.json", config_mgr, base_folder=tmp_path)


def test_statement_without_resource_is_rejected(role, config_mgr, tmp_path):
    policy = tmp_path / "broken.json"
    policy.write_text(json.dumps({
        "inline": {"Publish": [{"Effect": "Allow", "Action": ["sns:Publish"]}]},
    }))

    with pytest.raises(ValueError, match="must include Resource or NotResource"):
        apply_policies_to_role(role, "broken.json", config_mgr, base_folder=tmp_path)
