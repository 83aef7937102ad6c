"""DB Code Generator - Generates Rust row types from a live PostgreSQL schema."""

from .dialects import Dialect, DialectRenderer, renderer_for
from .main import (
    EnumVariant,
    ResolvedEntity,
    ResolvedEnum,
    ResolvedField,
    GeneratorContext,
    GeneratorOptions,
    generate,
    resolve_schema,
    synthesize_enum,
    write_output,
    main,
)
from .types import DEFAULT_RUST_TYPES, TypeMapping, resolve_field_type

__all__ = [
    "Dialect",
    "DialectRenderer",
    "renderer_for",
    "EnumVariant",
    "ResolvedEntity",
    "ResolvedEnum",
    "ResolvedField",
    "GeneratorContext",
    "GeneratorOptions",
    "generate",
    "resolve_schema",
    "synthesize_enum",
    "write_output",
    "main",
    "DEFAULT_RUST_TYPES",
    "TypeMapping",
    "resolve_field_type",
]
