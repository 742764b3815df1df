"""
Notification builder for the SPA Hosting Kit.

Creates the SNS topic the stack reports to, subscribes the configured email
address and routes CodePipeline execution state changes to it through
EventBridge. Subscription confirmation and delivery happen outside the stack.
"""

from __future__ import annotations
from aws_cdk import (
    aws_events as events,
    aws_events_targets as targets,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
    CfnOutput,
)
from constructs import Construct
from spa_hosting_kit.configs.hosting_cfg import HostingCfg

PIPELINE_STATE_DETAIL_TYPE = "CodePipeline Pipeline Execution State Change"

def pipeline_state_pattern(pipeline_name: str, state: str) -> events.EventPattern:
    """
    EventBridge pattern matching one execution state of one pipeline.

    Args:
        pipeline_name: Pipeline to watch
        state: Execution state, e.g. SUCCEEDED or FAILED

    Returns:
        Event pattern
    """
    return events.EventPattern(
        source=["aws.codepipeline"],
        detail_type=[PIPELINE_STATE_DETAIL_TYPE],
        detail={"state": [state], "pipeline": [pipeline_name]},
    )

class PipelineNotifications(Construct):
    """
    SNS topic with an email subscription and pipeline success/failure rules.

    Attributes:
        topic: Notification topic
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            cfg: HostingCfg
        ) -> None:
        super().__init__(scope, construct_id)

        self.cfg = cfg
        self.topic = sns.Topic(
            self,
            "NotificationTopic",
            display_name=f"{cfg.project_name} Hosting Notifications",
            topic_name=cfg.topic_name,
        )
        self.topic.add_subscription(subscriptions.EmailSubscription(cfg.notification.email))

        CfnOutput(
            self,
            "NotificationTopicArn",
            value=self.topic.topic_arn,
            description="SNS topic ARN for notifications",
        )

    def attach_to_pipeline(self, pipeline_name: str) -> None:
        """
        Publish a message to the topic when the pipeline succeeds or fails.

        Args:
            pipeline_name: Name of the pipeline to watch
        """
        messages = {
            "SUCCEEDED": (
                "PipelineSuccessNotification",
                "SPA Hosting Pipeline Succeeded\n\n"
                f"Pipeline: {pipeline_name}\nTime: {events.EventField.time}\n\n"
                "Your SPA has been successfully deployed!",
            ),
            "FAILED": (
                "PipelineFailureNotification",
                "SPA Hosting Pipeline Failed\n\n"
                f"Pipeline: {pipeline_name}\nTime: {events.EventField.time}\n\n"
                "Please check the AWS Console for details.",
            ),
        }

        for state, (rule_id, text) in messages.items():
            rule = events.Rule(
                self,
                rule_id,
                event_pattern=pipeline_state_pattern(pipeline_name, state),
            )
            rule.add_target(
                targets.SnsTopic(self.topic, message=events.RuleTargetInput.from_text(text))
            )
