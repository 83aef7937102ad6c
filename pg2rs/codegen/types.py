"""Type mapping from PostgreSQL column types to Rust type expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Iterable, Mapping

from ..shared.catalog import Column
from ..shared.errors import UnresolvedEnumReferenceError, UnsupportedTypeError

# Scalar types whose Rust representation never depends on configuration
DEFAULT_RUST_TYPES: Final[dict[str, str]] = {
    "bool": "bool",
    "boolean": "bool",
    "char": "i8",
    "int2": "i16",
    "smallint": "i16",
    "smallserial": "i16",
    "int4": "i32",
    "int": "i32",
    "integer": "i32",
    "serial": "i32",
    "int8": "i64",
    "bigint": "i64",
    "bigserial": "i64",
    "oid": "u32",
    "float4": "f32",
    "real": "f32",
    "float8": "f64",
    "double precision": "f64",
    "text": "String",
    "varchar": "String",
    "character varying": "String",
    "bpchar": "String",
    "character": "String",
    "name": "String",
    "citext": "String",
    "bytea": "Vec<u8>",
    "uuid": "uuid::Uuid",
    "json": "serde_json::Value",
    "jsonb": "serde_json::Value",
    "inet": "std::net::IpAddr",
}

CHRONO_TIME_TYPES: Final[dict[str, str]] = {
    "timestamp": "NaiveDateTime",
    "timestamp without time zone": "NaiveDateTime",
    "timestamptz": "DateTime<Utc>",
    "timestamp with time zone": "DateTime<Utc>",
    "date": "NaiveDate",
    "time": "NaiveTime",
    "time without time zone": "NaiveTime",
}

STD_TIME_TYPES: Final[dict[str, str]] = {
    "timestamp": "SystemTime",
    "timestamp without time zone": "SystemTime",
    "timestamptz": "SystemTime",
    "timestamp with time zone": "SystemTime",
    "date": "String",
    "time": "String",
    "time without time zone": "String",
}

NUMERIC_TYPES: Final[tuple[str, ...]] = ("numeric", "decimal")

# Bare identifiers that need a `use` line, grouped by module path
_IMPORTABLE: Final[dict[str, str]] = {
    "DateTime": "chrono",
    "NaiveDate": "chrono",
    "NaiveDateTime": "chrono",
    "NaiveTime": "chrono",
    "Utc": "chrono",
    "Decimal": "rust_decimal",
    "SystemTime": "std::time",
}

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z_][A-Za-z0-9_]*)*")


@dataclass(frozen=True, slots=True)
class TypeMapping:
    """Immutable lookup table from database type names to Rust types."""

    types: Mapping[str, str]
    use_rust_decimal: bool = False
    use_chrono_crate: bool = False

    @classmethod
    def from_flags(
        cls,
        use_rust_decimal: bool = False,
        use_chrono_crate: bool = False,
        overrides: Mapping[str, str] | None = None,
    ) -> TypeMapping:
        """Build the mapping for the given representation flags.

        Entries in ``overrides`` replace or extend the built-in table.
        """
        types = dict(DEFAULT_RUST_TYPES)
        types.update(CHRONO_TIME_TYPES if use_chrono_crate else STD_TIME_TYPES)
        numeric = "Decimal" if use_rust_decimal else "f64"
        types.update({name: numeric for name in NUMERIC_TYPES})
        types.update(overrides or {})
        return cls(
            types=MappingProxyType(types),
            use_rust_decimal=use_rust_decimal,
            use_chrono_crate=use_chrono_crate,
        )

    def lookup(self, type_name: str) -> str | None:
        mapped = self.types.get(type_name)
        if mapped is None:
            mapped = self.types.get(type_name.lower())
        return mapped

    def bare_names(self) -> frozenset[str]:
        """Unqualified identifiers that the mapped Rust types refer to."""
        return frozenset(
            identifier
            for rust_type in self.types.values()
            for identifier in _IDENTIFIER.findall(rust_type)
            if "::" not in identifier
        )


def resolve_field_type(
    column: Column,
    mapping: TypeMapping,
    enum_types: Mapping[str, str],
    table_name: str = "<unknown>",
    schema: str | None = None,
) -> str:
    """Resolve the Rust type expression for a column.

    Args:
        column: Column read from the catalog.
        mapping: Active type mapping.
        enum_types: Database enum name to generated Rust enum name.
        table_name: Owning table, for error messages.
        schema: Owning schema, for error messages.

    Returns:
        The Rust type, wrapped in ``Vec`` for arrays and ``Option`` for
        nullable columns.

    Raises:
        UnresolvedEnumReferenceError: If the column's enum was not read.
        UnsupportedTypeError: If no type mapping exists.
    """
    context = f"column '{table_name}.{column.name}'"

    if column.enum_name is not None:
        rust_type = enum_types.get(column.enum_name)
        if rust_type is None:
            raise UnresolvedEnumReferenceError(column.enum_name, context, schema)
    else:
        rust_type = mapping.lookup(column.type_name)
        if rust_type is None:
            raise UnsupportedTypeError(column.type_name, context, schema)

    if column.is_array:
        rust_type = f"Vec<{rust_type}>"
    if column.is_nullable:
        rust_type = f"Option<{rust_type}>"
    return rust_type


def required_imports(
    rust_types: Iterable[str],
    local_names: Iterable[str] = (),
) -> list[str]:
    """Return the sorted `use` lines needed by the given type expressions.

    Identifiers in ``local_names`` are generated in the same file and are
    never imported.
    """
    local = set(local_names)
    modules: dict[str, set[str]] = {}
    for rust_type in rust_types:
        for identifier in _IDENTIFIER.findall(rust_type):
            module = _IMPORTABLE.get(identifier)
            if module is not None and identifier not in local:
                modules.setdefault(module, set()).add(identifier)

    lines = []
    for module in sorted(modules):
        names = sorted(modules[module])
        if len(names) == 1:
            lines.append(f"use {module}::{names[0]};")
        else:
            lines.append(f"use {module}::{{{', '.join(names)}}};")
    return lines
