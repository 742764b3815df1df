import logging
import os

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

SUBJECT = "SPA Hosting Stack Deployed"


def _message(project, url):
    return (
        f"Stack deployment complete for {project}!\n\n"
        f"CloudFront URL: {url}\n\n"
        "Next steps:\n"
        "1. Authorize the CodeStar Connection in the AWS Console\n"
        "2. Push changes to your GitHub repository to trigger the pipeline\n\n"
        "Your SPA hosting infrastructure is ready!"
    )


def handler(event, context):
    topic_arn = os.environ["TOPIC_ARN"]
    url = os.environ.get("CLOUDFRONT_URL", "")
    project = os.environ.get("PROJECT_NAME", "")

    # Invoked asynchronously from a custom resource; a failed publish must not fail the stack
    try:
        boto3.client("sns").publish(TopicArn=topic_arn, Subject=SUBJECT, Message=_message(project, url))
    except ClientError:
        logger.exception("Error sending deployment notification")
        return {"Status": "FAILED"}

    return {"Status": "SUCCESS"}
