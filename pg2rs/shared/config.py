"""
Configuration for pg2rs.

Environment variables (and an optional ``.env`` file) are loaded through
Pydantic Settings and serve as defaults for the CLI flags. Type mapping and
singularization overrides live in a YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import OverridesError


class Settings(BaseSettings):
    # Connection
    connection_string: str | None = Field(None, alias="POSTGRES_CONNECTION_STRING")
    user: str | None = Field(None, alias="POSTGRES_USER")
    password: str | None = Field(None, alias="POSTGRES_PASSWORD")
    host: str | None = Field(None, alias="POSTGRES_HOST")
    port: int | None = Field(None, alias="POSTGRES_PORT")
    database: str | None = Field(None, alias="POSTGRES_DATABASE")
    connect_timeout: float = Field(10.0, alias="POSTGRES_CONNECT_TIMEOUT")

    # Reflection
    db_schema: str | None = Field(None, alias="POSTGRES_SCHEMA")
    table: str | None = Field(None, alias="POSTGRES_TABLE")

    # Generation
    postgres_crate: str = Field("postgres", alias="POSTGRES_CRATE")
    singularize_table_names: bool = Field(False, alias="SINGULARIZE_TABLE_NAMES")
    use_chrono_crate: bool = Field(False, alias="USE_CHRONO_CRATE")
    use_rust_decimal: bool = Field(False, alias="USE_RUST_DECIMAL")
    overrides_file: Path | None = Field(None, alias="PG2RS_OVERRIDES")
    output_file: Path | None = Field(None, alias="OUTPUT_FILE")

    # Application
    log_level: str = Field("WARNING", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


@dataclass(frozen=True, slots=True)
class Overrides:
    """User supplied additions to the type mapping and singularization rules."""

    types: dict[str, str] = field(default_factory=dict)
    irregular_plurals: dict[str, str] = field(default_factory=dict)
    invariant_plurals: tuple[str, ...] = ()


def _string_mapping(value: Any, key: str, path: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise OverridesError(f"'{key}' must be a mapping", path)
    for name, target in value.items():
        if not isinstance(name, str) or not isinstance(target, str) or not target:
            raise OverridesError(f"'{key}' entries must map strings to strings", path)
    return dict(value)


def load_overrides(path: Path) -> Overrides:
    """Load type and singularization overrides from a YAML file.

    Args:
        path: Path to the overrides file.

    Returns:
        The parsed overrides.

    Raises:
        OverridesError: If the file cannot be read, parsed or validated.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise OverridesError(f"Failed to read overrides file: {e}", str(path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise OverridesError(f"Invalid YAML: {e}", str(path)) from e

    if data is None:
        return Overrides()
    if not isinstance(data, dict):
        raise OverridesError("Overrides root must be a mapping", str(path))

    unknown = sorted(set(data) - {"types", "singularize"})
    if unknown:
        raise OverridesError(f"Unknown keys: {', '.join(map(str, unknown))}", str(path))

    rules = data.get("singularize") or {}
    if not isinstance(rules, dict):
        raise OverridesError("'singularize' must be a mapping", str(path))

    invariant = rules.get("invariant") or []
    if not isinstance(invariant, list) or not all(isinstance(w, str) for w in invariant):
        raise OverridesError("'singularize.invariant' must be a list of strings", str(path))

    return Overrides(
        types=_string_mapping(data.get("types"), "types", str(path)),
        irregular_plurals=_string_mapping(
            rules.get("irregular"), "singularize.irregular", str(path)
        ),
        invariant_plurals=tuple(invariant),
    )


__all__ = ["Settings", "get_settings", "Overrides", "load_overrides"]
