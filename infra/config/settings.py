"""Stack Settings"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    スタック設定

    すべての値は環境変数 (API_STACK_*) から上書きできる。
    デフォルト値は既存環境のリソース名と一致させている。
    """

    # Stack
    stack_name: str = "CdkTestStack"
    stack_description: str = "Container API on ECS Fargate with CodePipeline delivery"
    aws_region: Optional[str] = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Network
    vpc_cidr: str = "10.0.0.0/23"
    max_azs: int = Field(default=1, ge=1)
    subnet_cidr_mask: int = Field(default=23, ge=16, le=28)
    security_group_name: str = "TestAPISecurityGroup"
    ingress_port: int = Field(default=80, ge=1, le=65535)
    allowed_ip: Optional[str] = None

    # ECR
    ecr_repository_name: str = "test-ecr-repository"

    # ECS Task
    task_family: str = "test-api-family"
    task_cpu: int = 1024
    task_memory_mib: int = 3072
    cpu_architecture: Literal["ARM64", "X86_64"] = "ARM64"
    container_name: str = "test-api-task"
    container_port: int = Field(default=80, ge=1, le=65535)

    # ECS Service
    desired_count: int = Field(default=0, ge=0)

    # Pipeline
    source_repository_name: str = "test-api"
    source_branch: str = "master"
    pipeline_name: str = "test-api-pipeline"
    build_test_commands: List[str] = Field(default_factory=list)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    class Config:
        env_prefix = "API_STACK_"
        env_file = ".env"
        case_sensitive = False

    @property
    def is_arm(self) -> bool:
        return self.cpu_architecture == "ARM64"


@lru_cache()
def get_settings() -> Settings:
    """設定のシングルトンインスタンスを取得"""
    return Settings()
