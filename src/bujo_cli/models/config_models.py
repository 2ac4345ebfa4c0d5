"""Configuration models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

OutputFormat = Literal["pretty", "table", "json", "yaml"]


class OutputConfig(BaseModel):
    """Output configuration."""

    format: OutputFormat = Field(default="pretty")
    compact: bool = Field(default=False)


class StorageConfig(BaseModel):
    """Storage configuration. ``db_path`` None means the default data dir."""

    db_path: str | None = Field(default=None)


class AppConfig(BaseModel):
    """Main bujo configuration"""

    owner_id: str = Field(default="local", description="Journal owner scope")
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("owner_id")
    @classmethod
    def validate_owner_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("owner_id cannot be empty")
        return v.strip()

    def get_value(self, key: str) -> Any:
        """Read a dotted key such as ``output.format``.

        Raises:
            KeyError: If the key does not exist
        """
        node: Any = self
        for part in key.split("."):
            if not isinstance(node, BaseModel) or part not in type(node).model_fields:
                raise KeyError(key)
            node = getattr(node, part)
        return node

    def with_value(self, key: str, value: Any) -> AppConfig:
        """Return a validated copy with a dotted key replaced.

        Raises:
            KeyError: If the key does not exist
            pydantic.ValidationError: If the value is not valid for the key
        """
        self.get_value(key)
        data = self.model_dump()
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            node = node[part]
        node[leaf] = value
        return AppConfig.model_validate(data)
