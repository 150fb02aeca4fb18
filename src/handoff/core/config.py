"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from handoff.core.exceptions import ConfigurationError
from handoff.models.escalation import TargetRole, TriggerKind

# Host-facing option names -> field names
_OPTION_NAMES: dict[str, str] = {
    "failureThreshold": "failure_threshold",
    "toolCallBudget": "tool_call_budget",
    "subBudget": "sub_budget",
    "repeatCount": "repeat_count",
    "contextWindow": "context_window",
    "clarificationThreshold": "clarification_threshold",
    "roleOverrides": "role_overrides",
}


class EngineConfig(BaseSettings):
    """Escalation thresholds and routing overrides."""

    model_config = {"env_prefix": "HANDOFF_ENGINE_"}

    failure_threshold: int = Field(default=3, ge=1)
    tool_call_budget: int = Field(default=10, ge=1)
    sub_budget: int = Field(default=5, ge=1)
    repeat_count: int = Field(default=2, ge=2)
    context_window: int = Field(default=5, ge=1)
    clarification_threshold: int = Field(default=3, ge=0)  # 0 disables
    role_overrides: dict[TriggerKind, TargetRole] = Field(default_factory=dict)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> EngineConfig:
        """Build a config from host options keyed by camelCase or field name.

        Raises:
            ConfigurationError: unknown option or value out of range.
        """
        kwargs: dict[str, Any] = {}
        for key, value in (options or {}).items():
            name = _OPTION_NAMES.get(key, key)
            if name not in cls.model_fields:
                raise ConfigurationError(f"Unknown engine option {key!r}")
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid engine options: {exc}") from exc


class RedisConfig(BaseSettings):
    """Redis escalation sink configuration."""

    model_config = {"env_prefix": "HANDOFF_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    key_prefix: str = "handoff"
    ttl_seconds: int = 4 * 60 * 60


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "HANDOFF_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_json: bool = False
    sink: Literal["memory", "redis"] = "memory"

    engine: EngineConfig = EngineConfig()
    redis: RedisConfig = RedisConfig()
