"""
Static website builder for the SPA Hosting Kit.

This module provides a builder for hosting a Single Page Application behind
CloudFront. The S3 bucket stays private and is reached only through an Origin
Access Control; 403/404 responses are rewritten to /index.html so client-side
routes resolve. An optional custom domain is attached with its ACM certificate.
"""

from __future__ import annotations
from aws_cdk import (
    aws_s3 as s3,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_certificatemanager as acm,
    Duration,
    RemovalPolicy,
    CfnOutput,
    Stack,
)
from constructs import Construct
from spa_hosting_kit.configs.hosting_cfg import HostingCfg

INDEX_DOCUMENT = "index.html"
SPA_FALLBACK_STATUSES = (403, 404)
SPA_FALLBACK_TTL = Duration.minutes(5)

class StaticWebsite(Construct):
    """
    Private S3 bucket fronted by a CloudFront distribution.

    Attributes:
        bucket: Site bucket the pipeline deploys into
        distribution: CloudFront distribution serving the bucket
        url: https URL of the site (custom domain when configured)
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            cfg: HostingCfg
        ) -> None:
        """
        Initialize the static website builder.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            cfg: Validated hosting configuration
        """
        super().__init__(scope, construct_id)

        self.bucket = s3.Bucket(
            self,
            "SpaBucket",
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            encryption=s3.BucketEncryption.S3_MANAGED,
            object_ownership=s3.ObjectOwnership.BUCKET_OWNER_ENFORCED,
            enforce_ssl=True,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True,
        )

        domain_names = None
        certificate = None
        if cfg.domain.custom_domain:
            domain_names = [cfg.domain.custom_domain]
            certificate = acm.Certificate.from_certificate_arn(
                self, "Certificate", cfg.domain.certificate_arn
            )

        self.distribution = cloudfront.Distribution(
            self,
            "SpaDistribution",
            comment=f"{cfg.project_name} SPA hosting",
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_control(self.bucket),
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                compress=True,
            ),
            default_root_object=INDEX_DOCUMENT,
            error_responses=[
                cloudfront.ErrorResponse(
                    http_status=status,
                    response_http_status=200,
                    response_page_path=f"/{INDEX_DOCUMENT}",
                    ttl=SPA_FALLBACK_TTL,
                )
                for status in SPA_FALLBACK_STATUSES
            ],
            domain_names=domain_names,
            certificate=certificate,
        )

        host = cfg.domain.custom_domain or self.distribution.distribution_domain_name
        self.url = f"https://{host}"

        CfnOutput(
            self,
            "S3BucketName",
            value=self.bucket.bucket_name,
            description="S3 bucket name for static files (private, accessed via CloudFront)",
        )
        CfnOutput(
            self,
            "CloudFrontUrl",
            value=f"https://{self.distribution.distribution_domain_name}",
            description="CloudFront distribution URL",
        )
        if cfg.domain.custom_domain:
            CfnOutput(
                self,
                "CustomDomainUrl",
                value=self.url,
                description=f"Point a CNAME/alias for {cfg.domain.custom_domain} at the CloudFront domain",
            )

    @property
    def distribution_arn(self) -> str:
        stack = Stack.of(self)
        return f"arn:{stack.partition}:cloudfront::{stack.account}:distribution/{self.distribution.distribution_id}"
