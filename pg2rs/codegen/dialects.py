"""Output dialects: the Rust client crate the generated types plug into."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Final

from ..shared.errors import DialectError

if TYPE_CHECKING:
    from jinja2 import Environment

    from .main import ResolvedEntity, ResolvedEnum, ResolvedField


class Dialect(str, Enum):
    """Supported Rust database client crates."""

    POSTGRES = "postgres"
    TOKIO_POSTGRES = "tokio_postgres"
    SQLX = "sqlx"

    @classmethod
    def parse(cls, value: str | Dialect) -> Dialect:
        try:
            return cls(value)
        except ValueError as e:
            choices = ", ".join(d.value for d in cls)
            raise DialectError(f"expected one of {choices}", str(value)) from e


ENUM_DERIVES: Final[tuple[str, ...]] = ("Debug", "Clone", "Copy", "PartialEq", "Eq", "Hash")
STRUCT_DERIVES: Final[tuple[str, ...]] = ("Debug", "Clone", "PartialEq")


class DialectRenderer(ABC):
    """Attaches a dialect's conversion convention to generated types.

    The field list and field types are never altered here; a renderer only
    contributes imports, derives, attributes and the row conversion block.
    """

    dialect: Dialect

    @abstractmethod
    def imports(self, has_enums: bool, has_tables: bool) -> list[str]:
        """`use` lines the dialect needs at the top of the file."""

    @abstractmethod
    def reserved_names(self) -> list[str]:
        """Identifiers the dialect's imports bring into scope."""

    @abstractmethod
    def enum_derives(self) -> list[str]:
        ...

    @abstractmethod
    def enum_attributes(self, enum: ResolvedEnum) -> list[str]:
        ...

    @abstractmethod
    def variant_attributes(self, label: str) -> list[str]:
        ...

    @abstractmethod
    def struct_derives(self) -> list[str]:
        ...

    @abstractmethod
    def field_attributes(self, field: ResolvedField) -> list[str]:
        ...

    @abstractmethod
    def render_conversion(self, env: Environment, entity: ResolvedEntity) -> str:
        """Render the row-to-struct conversion for an entity's field list."""


class RustPostgresRenderer(DialectRenderer):
    """The `postgres` and `tokio_postgres` crates: `FromSql`/`ToSql` and `From<Row>`."""

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.crate = dialect.value

    def imports(self, has_enums: bool, has_tables: bool) -> list[str]:
        lines = []
        if has_tables:
            lines.append(f"use {self.crate}::Row;")
        if has_enums:
            lines.append(f"use {self.crate}::types::{{FromSql, ToSql}};")
        return lines

    def reserved_names(self) -> list[str]:
        return ["Row", "FromSql", "ToSql"]

    def enum_derives(self) -> list[str]:
        return [*ENUM_DERIVES, "ToSql", "FromSql"]

    def enum_attributes(self, enum: ResolvedEnum) -> list[str]:
        return [f"#[postgres(name = {rust_string(enum.db_name)})]"]

    def variant_attributes(self, label: str) -> list[str]:
        return [f"#[postgres(name = {rust_string(label)})]"]

    def struct_derives(self) -> list[str]:
        return list(STRUCT_DERIVES)

    def field_attributes(self, field: ResolvedField) -> list[str]:
        return []

    def render_conversion(self, env: Environment, entity: ResolvedEntity) -> str:
        return env.get_template("conversions/from_row.rs.j2").render(entity=entity)


class SqlxRenderer(DialectRenderer):
    """The `sqlx` crate: compile-time checked queries via `FromRow` and `Type`."""

    dialect = Dialect.SQLX

    def imports(self, has_enums: bool, has_tables: bool) -> list[str]:
        return []

    def reserved_names(self) -> list[str]:
        # derives are written as paths; nothing is imported
        return []

    def enum_derives(self) -> list[str]:
        return [*ENUM_DERIVES, "sqlx::Type"]

    def enum_attributes(self, enum: ResolvedEnum) -> list[str]:
        return [f"#[sqlx(type_name = {rust_string(enum.qualified_name)})]"]

    def variant_attributes(self, label: str) -> list[str]:
        return [f"#[sqlx(rename = {rust_string(label)})]"]

    def struct_derives(self) -> list[str]:
        return [*STRUCT_DERIVES, "sqlx::FromRow"]

    def field_attributes(self, field: ResolvedField) -> list[str]:
        if field.field_name == field.column_name:
            return []
        return [f"#[sqlx(rename = {rust_string(field.column_name)})]"]

    def render_conversion(self, env: Environment, entity: ResolvedEntity) -> str:
        # FromRow is derived; there is no hand-written conversion block
        return ""


RENDERERS: Final[dict[Dialect, DialectRenderer]] = {
    Dialect.POSTGRES: RustPostgresRenderer(Dialect.POSTGRES),
    Dialect.TOKIO_POSTGRES: RustPostgresRenderer(Dialect.TOKIO_POSTGRES),
    Dialect.SQLX: SqlxRenderer(),
}


def renderer_for(dialect: Dialect | str) -> DialectRenderer:
    return RENDERERS[Dialect.parse(dialect)]


_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


@lru_cache(maxsize=256)
def rust_string(value: str) -> str:
    """Quote a string as a Rust string literal."""
    out = []
    for char in value:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{{{ord(char):x}}}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'
