"""Redis connection settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

# serialised key -> (attribute, type)
_FIELDS: dict[str, tuple[str, type]] = {
    "addr": ("address", str),
    "db": ("db", int),
    "password": ("password", str),
    "expiration_seconds": ("expiration_seconds", int),
    "pool_size": ("pool_size", int),
    "max_retries": ("max_retries", int),
}


@dataclass
class RedisConfig:
    """Settings for a Redis client; missing fields take zero values."""

    address: str = ""
    db: int = 0
    password: str = ""
    expiration_seconds: int = 0
    pool_size: int = 0
    max_retries: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RedisConfig:
        """Build from serialised keys; unknown keys are ignored."""
        values: dict[str, Any] = {}
        for key, (attribute, kind) in _FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
                raise TypeError(
                    f"field {key!r} must be {kind.__name__}, got {type(value).__name__}"
                )
            values[attribute] = value
        return cls(**values)

    def to_mapping(self) -> dict[str, Any]:
        """Return the settings under their serialised keys."""
        return {key: getattr(self, attribute) for key, (attribute, _) in _FIELDS.items()}