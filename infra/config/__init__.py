from infra.config.context import DeploymentContext, resolve_allowed_cidr
from infra.config.settings import Settings, get_settings

__all__ = [
    "DeploymentContext",
    "Settings",
    "get_settings",
    "resolve_allowed_cidr",
]
