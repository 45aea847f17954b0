"""
Container API Stack

ECS Fargate 上の API サービスと、その CodePipeline デリバリーを 1 スタックで定義する。
"""
from typing import Optional

import structlog
from aws_cdk import (
    Stack,
    CfnOutput,
)
from constructs import Construct

from infra.config.context import resolve_allowed_cidr
from infra.config.settings import Settings, get_settings
from infra.stacks.container import ContainerService
from infra.stacks.network import Network
from infra.stacks.pipeline import DeliveryPipeline

logger = structlog.get_logger()


class ContainerApiStack(Stack):
    """Container API のメインスタック。"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[Settings] = None,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        settings = settings or get_settings()

        allowed_cidr = resolve_allowed_cidr(self.node, settings)

        # Network (VPC, Security Group)
        self.network = Network(
            self, 'Network',
            cidr=settings.vpc_cidr,
            max_azs=settings.max_azs,
            subnet_cidr_mask=settings.subnet_cidr_mask,
            security_group_name=settings.security_group_name,
            allowed_cidr=allowed_cidr,
            ingress_port=settings.ingress_port,
        )

        # Container (ECR, ECS Cluster, Task Definition, Fargate Service)
        self.container = ContainerService(
            self, 'Container',
            network=self.network,
            settings=settings,
        )

        # Pipeline (CodeCommit → CodeBuild → ECS Deploy)
        self.delivery = DeliveryPipeline(
            self, 'Delivery',
            repository=self.container.repository,
            service=self.container.service,
            container_name=self.container.container.container_name,
            settings=settings,
        )

        # Outputs
        CfnOutput(self, 'RepositoryUri', value=self.container.repository.repository_uri)
        CfnOutput(self, 'ClusterName', value=self.container.cluster.cluster_name)
        CfnOutput(self, 'ServiceName', value=self.container.service.service_name)
        CfnOutput(self, 'PipelineName', value=self.delivery.pipeline.pipeline_name)
        CfnOutput(
            self, 'SourceCloneUrl',
            value=self.delivery.source_repository.repository_clone_url_http,
        )

        logger.info(
            "stack_declared",
            stack=construct_id,
            allowed_cidr=allowed_cidr,
            ecr_repository=settings.ecr_repository_name,
            task_family=settings.task_family,
            pipeline=settings.pipeline_name,
        )
