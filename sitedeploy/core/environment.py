from __future__ import annotations

from enum import Enum

from sitedeploy.core.errors import ConfigError


class Environment(str, Enum):
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | Environment) -> Environment:
        if isinstance(value, Environment):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise ConfigError(f"unsupported environment '{value}'") from exc


__all__ = ["Environment"]
