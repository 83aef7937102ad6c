"""Custom exceptions for pg2rs."""

from __future__ import annotations

from typing import Sequence


class Pg2rsError(Exception):
    """Base exception for every fatal pg2rs error."""

    kind = "Error"

    def __init__(self, message: str, schema: str | None = None) -> None:
        self.schema = schema
        full_message = f"{message}" if not schema else f"[{schema}] {message}"
        super().__init__(full_message)


class CatalogConnectionError(Pg2rsError):
    """Raised when the catalog cannot be reached."""

    kind = "ConnectionError"

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        if target:
            message = f"Cannot reach '{target}': {message}"
        super().__init__(message)


class SchemaNotFoundError(Pg2rsError):
    """Raised when the requested schema does not exist."""

    kind = "SchemaNotFound"

    def __init__(self, schema: str) -> None:
        super().__init__(f"Schema '{schema}' does not exist")
        self.schema = schema


class NameCollisionError(Pg2rsError):
    """Raised when two database identifiers resolve to one Rust identifier."""

    kind = "NameCollision"

    def __init__(
        self,
        identifier: str,
        sources: Sequence[str],
        schema: str | None = None,
    ) -> None:
        self.identifier = identifier
        self.sources = tuple(sources)
        quoted = ", ".join(f"'{source}'" for source in self.sources)
        super().__init__(f"{quoted} all resolve to '{identifier}'", schema)


class UnresolvedEnumReferenceError(Pg2rsError):
    """Raised when a column references an enum type that was not read."""

    kind = "UnresolvedEnumReference"

    def __init__(
        self,
        enum_name: str,
        context: str,
        schema: str | None = None,
    ) -> None:
        self.enum_name = enum_name
        super().__init__(f"Unknown enum type '{enum_name}' ({context})", schema)


class UnsupportedTypeError(Pg2rsError):
    """Raised when a type mapping is missing."""

    kind = "UnsupportedType"

    def __init__(
        self,
        type_name: str,
        context: str,
        schema: str | None = None,
    ) -> None:
        self.type_name = type_name
        super().__init__(f"No type mapping for '{type_name}' ({context})", schema)


class DialectError(Pg2rsError):
    """Raised for an unknown output dialect."""

    kind = "Dialect"

    def __init__(self, message: str, dialect: str) -> None:
        self.dialect = dialect
        super().__init__(f"Dialect '{dialect}': {message}")


class OverridesError(Pg2rsError):
    """Raised when the overrides file cannot be used."""

    kind = "InvalidOverrides"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message if not path else f"{path}: {message}")


class OutputWriteError(Pg2rsError):
    """Raised when generated code cannot be written."""

    kind = "OutputWriteError"

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(f"Failed to write '{path}': {message}")
