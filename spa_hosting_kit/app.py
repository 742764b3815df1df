import os
import sys

import aws_cdk as cdk
from aws_cdk import Environment
from spa_hosting_kit.configs.error_handler import HostingConfigError, ValidationFailure
from spa_hosting_kit.configs.hosting_cfg import get_cfg
from spa_hosting_kit.logger import get_logger
from spa_hosting_kit.stacks.spa_hosting_stack import SpaHostingStack

logger = get_logger(__name__)

STACK_ID = "SpaHostingStack"
DESCRIPTION = "SPA Hosting Kit - Infrastructure for hosting SPAs with automated CI/CD"


def build_app(app: cdk.App) -> SpaHostingStack:
    """
    Load the configured hosting document and add the hosting stack to `app`.

    Raises:
        HostingConfigError: If the document cannot be loaded or is invalid;
            no stack is added in that case
    """
    cfg = get_cfg(app)

    return SpaHostingStack(
        app,
        STACK_ID,
        cfg=cfg,
        env=Environment(
            account=cfg.account_id or os.environ.get("CDK_DEFAULT_ACCOUNT"),
            region=cfg.region,
        ),
        description=DESCRIPTION,
    )


def main() -> None:
    app = cdk.App()

    try:
        build_app(app)
    except ValidationFailure as e:
        logger.error("Configuration validation failed:")
        for error in e.errors:
            logger.error(f"  - {error}")
        sys.exit(1)
    except HostingConfigError as e:
        logger.error(f"Error loading configuration: {e}")
        sys.exit(1)

    app.synth()


if __name__ == "__main__":
    main()
