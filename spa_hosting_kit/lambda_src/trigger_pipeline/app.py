import logging
import os

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

AVAILABLE = "AVAILABLE"


def handler(event, context):
    pipeline_name = os.environ["PIPELINE_NAME"]
    connection_arn = os.environ["CONNECTION_ARN"]

    # Always report SUCCESS: the stack must deploy even when the pipeline cannot start yet
    try:
        conn = boto3.client("codeconnections").get_connection(ConnectionArn=connection_arn)
        status = conn["Connection"]["ConnectionStatus"]
        if status != AVAILABLE:
            logger.info(f"Connection {connection_arn} is {status}; pipeline not triggered")
            logger.info("Authorize the connection in the AWS Console, then start the pipeline manually.")
            return {"Status": "SUCCESS", "Message": "Connection not authorized"}

        resp = boto3.client("codepipeline").start_pipeline_execution(name=pipeline_name)
    except ClientError as e:
        logger.exception(f"Could not trigger {pipeline_name}")
        return {"Status": "SUCCESS", "Message": f"Error: {e}"}

    logger.info(f"Started {pipeline_name} execution {resp.get('pipelineExecutionId')}")
    return {"Status": "SUCCESS", "Message": "Pipeline triggered"}
