import logging
import os
import time

import boto3

logger = logging.getLogger()
logger.setLevel(logging.INFO)

SUBJECT = "CloudFront Cache Invalidated"
MESSAGE = "CloudFront cache has been invalidated. Your updated SPA will be available shortly."


def handler(event, context):
    distribution_id = os.environ["DISTRIBUTION_ID"]
    topic_arn = os.environ.get("TOPIC_ARN")

    cloudfront = boto3.client("cloudfront")
    resp = cloudfront.create_invalidation(
        DistributionId=distribution_id,
        InvalidationBatch={
            "CallerReference": str(int(time.time() * 1000)),
            "Paths": {"Quantity": 1, "Items": ["/*"]},
        },
    )
    invalidation_id = resp.get("Invalidation", {}).get("Id")
    logger.info(f"Created invalidation {invalidation_id} for {distribution_id}")

    if topic_arn:
        boto3.client("sns").publish(TopicArn=topic_arn, Subject=SUBJECT, Message=MESSAGE)

    return {"statusCode": 200, "body": "Invalidation created"}
