#!/usr/bin/env python3
"""
CDK Application Entry Point

Container API - ECS Fargate + CodePipeline をデプロイ。
"""
import os

import aws_cdk as cdk
import structlog

from infra.config.settings import Settings, get_settings
from infra.errors import ConfigurationError
from infra.log_config import configure_logging
from infra.stacks.container_api_stack import ContainerApiStack

logger = structlog.get_logger()


def build_environment(settings: Settings) -> cdk.Environment:
    """デプロイ先環境 (リージョンは設定値が CDK_DEFAULT_REGION より優先)"""
    return cdk.Environment(
        account=os.environ.get('CDK_DEFAULT_ACCOUNT'),
        region=settings.aws_region or os.environ.get('CDK_DEFAULT_REGION'),
    )


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = cdk.App()
    env = build_environment(settings)

    logger.info("synth_started", stack=settings.stack_name, region=env.region)
    try:
        ContainerApiStack(
            app,
            settings.stack_name,
            settings=settings,
            env=env,
            description=settings.stack_description,
        )
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        raise

    app.synth()


if __name__ == '__main__':
    main()
