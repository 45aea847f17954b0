"""
Delivery Pipeline

CodePipeline (Source → Build → Deploy):
- Source: CodeCommit
- Build: CodeBuild (docker build / push to ECR)
- Deploy: ECS (imagedefinitions.json)
"""
from aws_cdk import (
    aws_codebuild as codebuild,
    aws_codecommit as codecommit,
    aws_codepipeline as codepipeline,
    aws_codepipeline_actions as codepipeline_actions,
    aws_ecr as ecr,
    aws_ecs as ecs,
    aws_iam as iam,
)
from constructs import Construct

from infra.config.settings import Settings
from infra.stacks.buildspec import build_image_spec


class DeliveryPipeline(Construct):
    """コミットをトリガーにイメージをビルドしてサービスを更新するパイプライン。"""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        repository: ecr.IRepository,
        service: ecs.IBaseService,
        container_name: str,
        settings: Settings,
    ) -> None:
        super().__init__(scope, construct_id)

        self.pipeline = codepipeline.Pipeline(
            self, 'Pipeline',
            pipeline_name=settings.pipeline_name,
            cross_account_keys=False,
        )

        # =================================================================
        # Source Stage
        # =================================================================

        self.source_repository = codecommit.Repository(
            self, 'SourceRepository',
            repository_name=settings.source_repository_name,
        )
        source_output = codepipeline.Artifact('SourceOutput')
        self.pipeline.add_stage(
            stage_name='Source',
            actions=[
                codepipeline_actions.CodeCommitSourceAction(
                    action_name='Source',
                    repository=self.source_repository,
                    branch=settings.source_branch,
                    output=source_output,
                ),
            ],
        )

        # =================================================================
        # Build Stage
        # =================================================================

        self.build_role = iam.Role(
            self, 'BuildRole',
            assumed_by=iam.ServicePrincipal('codebuild.amazonaws.com'),
        )
        # GetAuthorizationToken を含む
        repository.grant_pull_push(self.build_role)

        self.build_project = codebuild.PipelineProject(
            self, 'BuildProject',
            role=self.build_role,
            build_spec=codebuild.BuildSpec.from_object(
                build_image_spec(settings.build_test_commands)
            ),
            environment=_build_environment(settings),
            environment_variables={
                'REPOSITORY_URI': codebuild.BuildEnvironmentVariable(
                    value=repository.repository_uri,
                ),
                'CONTAINER_NAME': codebuild.BuildEnvironmentVariable(
                    value=container_name,
                ),
            },
        )
        build_output = codepipeline.Artifact('BuildOutput')
        self.pipeline.add_stage(
            stage_name='Build',
            actions=[
                codepipeline_actions.CodeBuildAction(
                    action_name='Build',
                    project=self.build_project,
                    input=source_output,
                    outputs=[build_output],
                ),
            ],
        )

        # =================================================================
        # Deploy Stage
        # =================================================================

        self.pipeline.add_stage(
            stage_name='Deploy',
            actions=[
                codepipeline_actions.EcsDeployAction(
                    action_name='Deploy',
                    service=service,
                    input=build_output,
                ),
            ],
        )


def _build_environment(settings: Settings) -> codebuild.BuildEnvironment:
    """タスクと同じ CPU アーキテクチャでイメージをビルドする"""
    if settings.is_arm:
        return codebuild.BuildEnvironment(
            build_image=codebuild.LinuxArmBuildImage.AMAZON_LINUX_2_STANDARD_3_0,
            compute_type=codebuild.ComputeType.LARGE,
            privileged=True,
        )
    return codebuild.BuildEnvironment(
        build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
        compute_type=codebuild.ComputeType.SMALL,
        privileged=True,
    )
