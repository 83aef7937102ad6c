"""Shared utilities for pg2rs."""

from .catalog import (
    Column,
    EnumType,
    Schema,
    Table,
    CatalogReader,
    read_catalog,
    build_dsn,
    mask_dsn,
)
from .config import (
    Overrides,
    Settings,
    get_settings,
    load_overrides,
)
from .naming import (
    to_pascal_case,
    to_snake_case,
    singularize,
    Singularizer,
    resolve_type_name,
    sanitize_field_name,
    sanitize_type_name,
    sanitize_variant_name,
    RUST_KEYWORDS,
)
from .errors import (
    Pg2rsError,
    CatalogConnectionError,
    SchemaNotFoundError,
    NameCollisionError,
    UnresolvedEnumReferenceError,
    UnsupportedTypeError,
    DialectError,
    OverridesError,
    OutputWriteError,
)
from .log import configure_logging, get_logger

__all__ = [
    # Catalog reading
    "Column",
    "EnumType",
    "Schema",
    "Table",
    "CatalogReader",
    "read_catalog",
    "build_dsn",
    "mask_dsn",
    # Configuration
    "Overrides",
    "Settings",
    "get_settings",
    "load_overrides",
    # Naming utilities
    "to_pascal_case",
    "to_snake_case",
    "singularize",
    "Singularizer",
    "resolve_type_name",
    "sanitize_field_name",
    "sanitize_type_name",
    "sanitize_variant_name",
    "RUST_KEYWORDS",
    # Errors
    "Pg2rsError",
    "CatalogConnectionError",
    "SchemaNotFoundError",
    "NameCollisionError",
    "UnresolvedEnumReferenceError",
    "UnsupportedTypeError",
    "DialectError",
    "OverridesError",
    "OutputWriteError",
    # Logging
    "configure_logging",
    "get_logger",
]
