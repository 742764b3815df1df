"""
CI/CD pipeline builder for the SPA Hosting Kit.

This module builds the pipeline that turns a push to the configured GitHub
branch into a deployed site:

1. Source: pulls the branch through a CodeConnections GitHub connection.
2. Build: runs the generated buildspec in CodeBuild.
3. Deploy: extracts the build output into the site bucket.

The GitHub connection is created in PENDING state; it has to be authorized
once in the AWS Console before the pipeline can run.
"""

from __future__ import annotations
from aws_cdk import (
    aws_codebuild as codebuild,
    aws_codeconnections as codeconnections,
    aws_codepipeline as codepipeline,
    aws_codepipeline_actions as actions,
    CfnOutput,
    Stack,
)
from constructs import Construct
from spa_hosting_kit.builders.static_site_builder import StaticWebsite
from spa_hosting_kit.configs.hosting_cfg import HostingCfg
from spa_hosting_kit.pipeline.buildspec_generator import BuildSpecGenerator

def connections_console_url(region: str) -> str:
    return f"https://console.aws.amazon.com/codesuite/settings/connections?region={region}"

class HostingPipeline(Construct):
    """
    GitHub connection, CodeBuild project and three-stage CodePipeline.

    Attributes:
        connection: GitHub connection (needs manual authorization)
        project: CodeBuild project running the generated buildspec
        pipeline: Source -> Build -> Deploy pipeline
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            cfg: HostingCfg,
            site: StaticWebsite
        ) -> None:
        """
        Initialize the pipeline builder.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            cfg: Validated hosting configuration
            site: Static website the pipeline deploys into
        """
        super().__init__(scope, construct_id)

        region = Stack.of(self).region

        self.connection = codeconnections.CfnConnection(
            self,
            "GitHubConnection",
            connection_name=cfg.connection_name,
            provider_type="GitHub",
        )

        build_spec = BuildSpecGenerator.generate(cfg)
        self.project = codebuild.PipelineProject(
            self,
            "SpaBuildProject",
            description=f"Builds {cfg.source.owner}/{cfg.source.repo} for {cfg.project_name}",
            environment=codebuild.BuildEnvironment(
                build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
                compute_type=codebuild.ComputeType.SMALL,
            ),
            build_spec=codebuild.BuildSpec.from_object(build_spec.to_dict()),
        )
        site.bucket.grant_read_write(self.project)

        source_output = codepipeline.Artifact("SourceOutput")
        build_output = codepipeline.Artifact("BuildOutput")

        self.pipeline = codepipeline.Pipeline(
            self,
            "SpaPipeline",
            pipeline_name=cfg.pipeline_name,
            restart_execution_on_update=True,
            stages=[
                codepipeline.StageProps(
                    stage_name="Source",
                    actions=[
                        actions.CodeStarConnectionsSourceAction(
                            action_name="GitHub_Source",
                            owner=cfg.source.owner,
                            repo=cfg.source.repo,
                            branch=cfg.source.branch,
                            output=source_output,
                            connection_arn=self.connection.attr_connection_arn,
                        )
                    ],
                ),
                codepipeline.StageProps(
                    stage_name="Build",
                    actions=[
                        actions.CodeBuildAction(
                            action_name="Build_SPA",
                            project=self.project,
                            input=source_output,
                            outputs=[build_output],
                        )
                    ],
                ),
                codepipeline.StageProps(
                    stage_name="Deploy",
                    actions=[
                        actions.S3DeployAction(
                            action_name="Deploy_to_S3",
                            bucket=site.bucket,
                            input=build_output,
                            extract=True,
                        )
                    ],
                ),
            ],
        )

        CfnOutput(
            self,
            "CodeStarConnectionArn",
            value=self.connection.attr_connection_arn,
            description="CodeStar Connection ARN (requires authorization in AWS Console)",
        )
        CfnOutput(
            self,
            "AuthorizeConnectionUrl",
            value=connections_console_url(region),
            description="Authorize the connection at this URL before the pipeline can run",
        )
        CfnOutput(
            self,
            "PipelineName",
            value=self.pipeline.pipeline_name,
            description="CodePipeline name",
        )

    @property
    def connection_arn(self) -> str:
        return self.connection.attr_connection_arn
