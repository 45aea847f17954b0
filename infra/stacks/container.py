"""
Container Service

- ECR Repository
- ECS Cluster
- Task Execution Role
- Fargate Task Definition (1 container)
- Fargate Service
"""
from aws_cdk import (
    RemovalPolicy,
    aws_ec2 as ec2,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_iam as iam,
    aws_logs as logs,
)
from constructs import Construct

from infra.config.settings import Settings
from infra.stacks.network import Network

CPU_ARCHITECTURES = {
    'ARM64': ecs.CpuArchitecture.ARM64,
    'X86_64': ecs.CpuArchitecture.X86_64,
}


class ContainerService(Construct):
    """ECR からイメージを取得して Fargate 上で動かすサービス。"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        network: Network,
        settings: Settings,
    ) -> None:
        super().__init__(scope, construct_id)

        # =================================================================
        # ECR Repository
        # =================================================================

        self.repository = ecr.Repository(
            self, 'Repository',
            repository_name=settings.ecr_repository_name,
        )

        # =================================================================
        # ECS Cluster
        # =================================================================

        # サービスと同じ Network の VPC に配置する
        self.cluster = ecs.Cluster(
            self, 'Cluster',
            vpc=network.vpc,
        )

        # =================================================================
        # Task Role
        # =================================================================

        self.task_role = iam.Role(
            self, 'TaskRole',
            assumed_by=iam.ServicePrincipal('ecs-tasks.amazonaws.com'),
        )
        self.task_role.add_managed_policy(
            iam.ManagedPolicy.from_aws_managed_policy_name(
                'service-role/AmazonECSTaskExecutionRolePolicy'
            )
        )

        # =================================================================
        # Task Definition
        # =================================================================

        self.task_definition = ecs.TaskDefinition(
            self, 'TaskDefinition',
            family=settings.task_family,
            compatibility=ecs.Compatibility.FARGATE,
            network_mode=ecs.NetworkMode.AWS_VPC,
            cpu=str(settings.task_cpu),
            memory_mib=str(settings.task_memory_mib),
            execution_role=self.task_role,
            task_role=self.task_role,
            runtime_platform=ecs.RuntimePlatform(
                cpu_architecture=CPU_ARCHITECTURES[settings.cpu_architecture],
                operating_system_family=ecs.OperatingSystemFamily.LINUX,
            ),
        )

        self.log_group = logs.LogGroup(
            self, 'LogGroup',
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=RemovalPolicy.DESTROY,
        )

        port = settings.container_port
        self.container = self.task_definition.add_container(
            settings.container_name,
            container_name=settings.container_name,
            image=ecs.ContainerImage.from_ecr_repository(self.repository),
            port_mappings=[
                ecs.PortMapping(
                    name=f'{settings.container_name}-{port}-tcp',
                    container_port=port,
                    host_port=port,
                    protocol=ecs.Protocol.TCP,
                ),
            ],
            essential=True,
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix=settings.container_name,
                log_group=self.log_group,
            ),
        )

        # =================================================================
        # Fargate Service
        # =================================================================
        # NAT が無いため Public Subnet + Public IP で ECR からイメージを取得する

        self.service = ecs.FargateService(
            self, 'Service',
            cluster=self.cluster,
            task_definition=self.task_definition,
            desired_count=settings.desired_count,
            security_groups=[network.security_group],
            assign_public_ip=True,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
        )

