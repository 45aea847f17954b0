"""
Deployment Context

CDK コンテキスト `env` から許可する接続元アドレスを取得する。
cdk.json には既定値を置かない (未指定なら API_STACK_ALLOWED_IP、それも無ければエラー)。

    cdk deploy -c env='{"myIPAddress": "203.0.113.10"}'
"""
import ipaddress
import json
from typing import Any, Mapping, Optional

import structlog
from constructs import Node
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from infra.config.settings import Settings
from infra.errors import ConfigurationError

logger = structlog.get_logger()

CONTEXT_KEY = "env"


class DeploymentContext(BaseModel):
    """デプロイ時に渡されるコンテキスト値"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    my_ip_address: str = Field(alias="myIPAddress")

    @field_validator("my_ip_address")
    @classmethod
    def normalize_cidr(cls, value: str) -> str:
        """IPv4 アドレスを CIDR 表記に正規化 (単一アドレスは /32)"""
        try:
            network = ipaddress.ip_network(value.strip(), strict=False)
        except ValueError as e:
            raise ValueError(f"not an IPv4 address or CIDR: {value!r}") from e
        if network.version != 4:
            raise ValueError(f"only IPv4 sources are supported: {value!r}")
        return network.with_prefixlen

    @classmethod
    def from_raw(cls, raw: Any) -> "DeploymentContext":
        """コンテキスト値 (dict または JSON 文字列) から生成"""
        try:
            return cls.model_validate(_as_mapping(raw))
        except ValidationError as e:
            raise ConfigurationError(f"invalid context '{CONTEXT_KEY}': {e}") from e


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"context '{CONTEXT_KEY}' is not valid JSON: {e}"
            ) from e
    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"context '{CONTEXT_KEY}' must be an object, got {type(raw).__name__}"
        )
    return raw


def resolve_allowed_cidr(node: Node, settings: Settings) -> str:
    """
    インバウンドを許可する CIDR を決定する。

    優先順位: CDK コンテキスト > API_STACK_ALLOWED_IP
    コンテキスト `env` に myIPAddress が無ければ設定値を使う。
    """
    raw: Optional[Any] = node.try_get_context(CONTEXT_KEY)
    if raw is not None:
        values = _as_mapping(raw)
        if values.get("myIPAddress") is not None:
            context = DeploymentContext.from_raw(values)
            logger.debug("allowed_cidr_resolved", source="context", cidr=context.my_ip_address)
            return context.my_ip_address

    if settings.allowed_ip:
        context = DeploymentContext.from_raw({"myIPAddress": settings.allowed_ip})
        logger.debug("allowed_cidr_resolved", source="settings", cidr=context.my_ip_address)
        return context.my_ip_address

    raise ConfigurationError(
        f"no allow-listed source address: set context '{CONTEXT_KEY}.myIPAddress' "
        "or API_STACK_ALLOWED_IP"
    )
