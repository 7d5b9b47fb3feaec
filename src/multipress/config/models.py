"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, multipress.toml only contains
overrides. A fresh install needs nothing beyond ``[genesis] name``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# --- multipress.toml sections ---


class GenesisConfig(BaseModel):
    """[genesis] section: the root domain and its owner."""

    model_config = {"frozen": True}

    name: str = "localhost"
    domain_data: dict[str, str] = Field(default_factory=dict)
    user_data: dict[str, str] = Field(default_factory=dict)

    @field_validator("domain_data", "user_data", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        # TOML integers and booleans land in string-only data bags.
        if isinstance(value, dict):
            return {
                str(k): str(v).lower() if isinstance(v, bool) else str(v)
                for k, v in value.items()
            }
        return value


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: Path = Path(".multipress/multipress.db")


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    builtins: bool = True
