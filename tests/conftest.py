"""Shared fixtures"""
import aws_cdk as cdk
import pytest
from aws_cdk.assertions import Template

from infra.config.settings import Settings, get_settings
from infra.stacks.container_api_stack import ContainerApiStack

ALLOWED_IP = "203.0.113.10"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """環境変数に依存しないデフォルト設定"""
    return Settings(_env_file=None)


@pytest.fixture
def app() -> cdk.App:
    return cdk.App(context={"env": {"myIPAddress": ALLOWED_IP}})


@pytest.fixture
def stack(app: cdk.App, settings: Settings) -> ContainerApiStack:
    return ContainerApiStack(app, "TestStack", settings=settings)


@pytest.fixture
def template(stack: ContainerApiStack) -> Template:
    return Template.from_stack(stack)
