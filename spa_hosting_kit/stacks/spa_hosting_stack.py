"""
SPA hosting stack for the SPA Hosting Kit.

This stack wires the static website, the CI/CD pipeline and the notification
topic together, and adds the post-deployment helpers: a CloudFront cache
invalidation after every successful pipeline run, a one-off deployment
notification, and an initial pipeline execution once the GitHub connection is
authorized.
"""

from __future__ import annotations

from aws_cdk import (
    CfnOutput,
    Stack,
    Tags,
    aws_events as events,
    aws_events_targets as targets,
    aws_iam as iam,
    aws_lambda as _lambda,
    custom_resources as cr,
)
from constructs import Construct

from spa_hosting_kit.builders.lambda_builder import LambdaFleet
from spa_hosting_kit.builders.notification_builder import PipelineNotifications, pipeline_state_pattern
from spa_hosting_kit.builders.pipeline_builder import HostingPipeline, connections_console_url
from spa_hosting_kit.builders.static_site_builder import StaticWebsite
from spa_hosting_kit.configs.config_manager import ConfigManager
from spa_hosting_kit.configs.hosting_cfg import HostingCfg

MANAGED_BY = "spa-hosting-kit"


class SpaHostingStack(Stack):
    """
    Hosting infrastructure and CI/CD for one Single Page Application.

    The configuration must already be validated; see ConfigLoader.load_validated.
    """

    def __init__(self, scope: Construct, construct_id: str, *, cfg: HostingCfg, **kwargs) -> None:
        """
        Initialize the hosting stack.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            cfg: Validated hosting configuration
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        self.cfg = cfg
        self._apply_tags()

        self.site = StaticWebsite(self, "Site", cfg=cfg)
        self.hosting_pipeline = HostingPipeline(self, "Pipeline", cfg=cfg, site=self.site)

        self.notifications = PipelineNotifications(self, "Notifications", cfg=cfg)
        self.notifications.attach_to_pipeline(cfg.pipeline_name)

        pipeline = self.hosting_pipeline.pipeline
        self.functions = LambdaFleet(
            self,
            "Functions",
            config_mgr=ConfigManager(self, cfg),
            extra_vars={
                "DistributionId": self.site.distribution.distribution_id,
                "DistributionArn": self.site.distribution_arn,
                "CloudFrontUrl": self.site.url,
                "TopicArn": self.notifications.topic.topic_arn,
                "PipelineArn": pipeline.pipeline_arn,
                "ConnectionArn": self.hosting_pipeline.connection_arn,
            },
        ).functions

        # Invalidate the cache whenever a new build lands in the bucket
        invalidation_rule = events.Rule(
            self,
            "PipelineSuccessRule",
            event_pattern=pipeline_state_pattern(cfg.pipeline_name, "SUCCEEDED"),
        )
        invalidation_rule.add_target(targets.LambdaFunction(self.functions["invalidate_cache"]))

        self._invoke_on_create("DeploymentNotification", self.functions["notify_deployment"], "Event")
        trigger = self._invoke_on_create(
            "InitialPipelineExecution", self.functions["trigger_pipeline"], "RequestResponse"
        )
        trigger.node.add_dependency(pipeline)

        self._add_next_steps_output()

    def _apply_tags(self) -> None:
        """
        Apply the default tags (ProjectName, ManagedBy) and user-defined tags.
        """
        Tags.of(self).add("ProjectName", self.cfg.project_name)
        Tags.of(self).add("ManagedBy", MANAGED_BY)
        for key, value in self.cfg.tags:
            Tags.of(self).add(key, value)

    def _invoke_on_create(
        self, construct_id: str, fn: _lambda.IFunction, invocation_type: str
    ) -> cr.AwsCustomResource:
        """
        Invoke a function once, when the stack is first created.

        Args:
            construct_id: Construct ID (also the physical resource ID)
            fn: Function to invoke
            invocation_type: "Event" (async) or "RequestResponse"

        Returns:
            The custom resource
        """
        return cr.AwsCustomResource(
            self,
            construct_id,
            on_create=cr.AwsSdkCall(
                service="Lambda",
                action="invoke",
                parameters={
                    "FunctionName": fn.function_name,
                    "InvocationType": invocation_type,
                },
                physical_resource_id=cr.PhysicalResourceId.of(construct_id),
            ),
            policy=cr.AwsCustomResourcePolicy.from_statements(
                [
                    iam.PolicyStatement(
                        actions=["lambda:InvokeFunction"],
                        resources=[fn.function_arn],
                    )
                ]
            ),
            install_latest_aws_sdk=False,
        )

    def _add_next_steps_output(self) -> None:
        rule = "=" * 63
        lines = [
            "",
            rule,
            "  NEXT STEPS TO COMPLETE SETUP",
            rule,
            "",
            "1. Authorize the GitHub connection:",
            f"   {connections_console_url(self.region)}",
            f"   Find: {self.cfg.connection_name}",
            '   Click "Update pending connection" and authorize',
            "",
            "2. Trigger the pipeline to deploy your SPA:",
            f"   aws codepipeline start-pipeline-execution --name {self.cfg.pipeline_name}",
            "",
            "3. Confirm the SNS subscription sent to:",
            f"   {self.cfg.notification.email}",
            "",
            rule,
            "  TO DELETE THIS STACK",
            rule,
            "",
            "   cdk destroy",
            "",
            "   This removes every resource, including the S3 bucket contents,",
            "   the CloudFront distribution, the pipeline and the connection.",
            rule,
        ]
        CfnOutput(
            self,
            "NextSteps",
            value="\n".join(lines),
            description="Post-deployment instructions",
        )
