"""Catalog reading: reflects tables, columns and enum types with asyncpg."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

import asyncpg

from .errors import CatalogConnectionError, SchemaNotFoundError
from .log import get_logger

log = get_logger(__name__)

SCHEMA_OID_SQL = """
SELECT n.oid
FROM pg_catalog.pg_namespace n
WHERE n.nspname = $1
"""

# Ordinary and partitioned tables; partitions are reflected through their parent
TABLES_SQL = """
SELECT c.relname AS table_name
FROM pg_catalog.pg_class c
WHERE c.relnamespace = $1
  AND c.relkind IN ('r', 'p')
  AND NOT c.relispartition
  AND ($2::text IS NULL OR c.relname = $2::text)
ORDER BY c.relname
"""

COLUMNS_SQL = """
SELECT c.relname AS table_name,
       a.attname AS column_name,
       COALESCE(et.typname, bt.typname, t.typname) AS type_name,
       et.oid IS NOT NULL AS is_array,
       NOT (a.attnotnull OR t.typnotnull) AS is_nullable,
       CASE WHEN COALESCE(et.typtype, bt.typtype, t.typtype) = 'e'
            THEN COALESCE(et.oid, bt.oid, t.oid)
       END AS enum_oid
FROM pg_catalog.pg_attribute a
JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
JOIN pg_catalog.pg_type t ON t.oid = a.atttypid
LEFT JOIN pg_catalog.pg_type bt ON t.typtype = 'd' AND bt.oid = t.typbasetype
LEFT JOIN pg_catalog.pg_type et ON t.typcategory = 'A' AND et.oid = t.typelem
WHERE c.relnamespace = $1
  AND c.relkind IN ('r', 'p')
  AND NOT c.relispartition
  AND ($2::text IS NULL OR c.relname = $2::text)
  AND a.attnum > 0
  AND NOT a.attisdropped
ORDER BY c.relname, a.attnum
"""

PRIMARY_KEYS_SQL = """
SELECT c.relname AS table_name,
       a.attname AS column_name
FROM pg_catalog.pg_index i
JOIN pg_catalog.pg_class c ON c.oid = i.indrelid
CROSS JOIN LATERAL unnest(i.indkey::int2[]) WITH ORDINALITY AS k(attnum, position)
JOIN pg_catalog.pg_attribute a ON a.attrelid = c.oid AND a.attnum = k.attnum
WHERE i.indisprimary
  AND c.relnamespace = $1
  AND ($2::text IS NULL OR c.relname = $2::text)
ORDER BY c.relname, k.position
"""

# Enums of the namespace plus enums from other namespaces that columns use.
# An enum without labels yields one row with a NULL label.
ENUMS_SQL = """
SELECT t.oid AS enum_oid,
       n.nspname AS enum_schema,
       t.typname AS enum_name,
       e.enumlabel AS label
FROM pg_catalog.pg_type t
JOIN pg_catalog.pg_namespace n ON n.oid = t.typnamespace
LEFT JOIN pg_catalog.pg_enum e ON e.enumtypid = t.oid
WHERE t.typtype = 'e'
  AND (t.typnamespace = $1 OR t.oid = ANY($2::oid[]))
ORDER BY t.typnamespace <> $1, n.nspname, t.typname, e.enumsortorder
"""


@dataclass(frozen=True, slots=True)
class Column:
    """A table column as declared in the catalog.

    ``enum_name`` is the ``qualified_name`` of the column's enum type.
    """

    name: str
    type_name: str
    is_nullable: bool
    is_array: bool = False
    enum_name: str | None = None


@dataclass(frozen=True, slots=True)
class Table:
    """A table with its columns in declaration order."""

    name: str
    columns: tuple[Column, ...]
    primary_key: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EnumType:
    """A database enum type with its labels in sort order.

    ``schema`` is set only for enums defined outside the reflected schema.
    """

    name: str
    labels: tuple[str, ...]
    schema: str | None = None

    @property
    def qualified_name(self) -> str:
        if self.schema is None:
            return self.name
        return f"{self.schema}.{self.name}"


@dataclass(frozen=True, slots=True)
class Schema:
    """Everything reflected from one database namespace."""

    name: str
    tables: tuple[Table, ...] = ()
    enums: tuple[EnumType, ...] = ()
    table_filter: str | None = field(default=None, compare=False)

    def enum(self, name: str) -> EnumType | None:
        return next((item for item in self.enums if item.qualified_name == name), None)


def build_dsn(
    user: str,
    password: str,
    host: str,
    port: int | str,
    database: str,
) -> str:
    """Assemble a connection string from discrete credentials."""
    return (
        f"postgresql://{quote(user, safe='')}:{quote(password, safe='')}"
        f"@{host}:{port}/{quote(database, safe='')}"
    )


def mask_dsn(dsn: str) -> str:
    """Hide the password of a connection string for log and error output."""
    parts = urlsplit(dsn)
    if not parts.password:
        return dsn
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def _group(rows: Sequence[Any], key: str) -> dict[Any, list[Any]]:
    grouped: dict[Any, list[Any]] = {}
    for row in rows:
        grouped.setdefault(row[key], []).append(row)
    return grouped


def _enum_reference(column_row: Any, enum_names: dict[int, str]) -> str | None:
    if column_row["enum_oid"] is None:
        return None
    # an enum that was not read keeps its bare name and fails resolution later
    return enum_names.get(column_row["enum_oid"], column_row["type_name"])


class CatalogReader:
    """Runs the catalog queries over an open asyncpg connection."""

    __slots__ = ("_conn",)

    def __init__(self, conn: Any) -> None:
        self._conn = conn

    async def read(self, schema: str, table: str | None = None) -> Schema:
        """Reflect a schema, optionally limited to a single table.

        Raises:
            SchemaNotFoundError: If the schema does not exist.
        """
        namespace = await self._conn.fetchval(SCHEMA_OID_SQL, schema)
        if namespace is None:
            raise SchemaNotFoundError(schema)

        table_rows = await self._conn.fetch(TABLES_SQL, namespace, table)
        column_rows = await self._conn.fetch(COLUMNS_SQL, namespace, table)
        pk_rows = await self._conn.fetch(PRIMARY_KEYS_SQL, namespace, table)
        used_enums = sorted(
            {row["enum_oid"] for row in column_rows if row["enum_oid"] is not None}
        )
        enum_rows = await self._conn.fetch(ENUMS_SQL, namespace, used_enums)

        enums: list[EnumType] = []
        enum_names: dict[int, str] = {}
        for oid, rows in _group(enum_rows, "enum_oid").items():
            owner = rows[0]["enum_schema"]
            enum = EnumType(
                name=rows[0]["enum_name"],
                labels=tuple(row["label"] for row in rows if row["label"] is not None),
                schema=None if owner == schema else owner,
            )
            enums.append(enum)
            enum_names[oid] = enum.qualified_name

        columns = _group(column_rows, "table_name")
        primary_keys = _group(pk_rows, "table_name")

        tables = tuple(
            Table(
                name=row["table_name"],
                columns=tuple(
                    Column(
                        name=col["column_name"],
                        type_name=col["type_name"],
                        is_nullable=bool(col["is_nullable"]),
                        is_array=bool(col["is_array"]),
                        enum_name=_enum_reference(col, enum_names),
                    )
                    for col in columns.get(row["table_name"], [])
                ),
                primary_key=tuple(
                    pk["column_name"] for pk in primary_keys.get(row["table_name"], [])
                ),
            )
            for row in table_rows
        )

        log.debug("Tables: %s", [t.name for t in tables])
        log.debug("Enums: %s", [e.qualified_name for e in enums])
        return Schema(
            name=schema, tables=tables, enums=tuple(enums), table_filter=table
        )


async def read_catalog(
    dsn: str,
    schema: str,
    table: str | None = None,
    timeout: float = 10.0,
) -> Schema:
    """Connect to the database and reflect one schema.

    The connection is closed before returning. Nothing is retried.

    Raises:
        CatalogConnectionError: If the server cannot be reached or a
            catalog query fails.
        SchemaNotFoundError: If the schema does not exist.
    """
    target = mask_dsn(dsn)
    log.debug("Using connection string: %s", target)
    try:
        conn = await asyncpg.connect(dsn, timeout=timeout)
    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        raise CatalogConnectionError(str(e) or type(e).__name__, target) from e
    log.debug("Connected to database")

    try:
        return await CatalogReader(conn).read(schema, table)
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        raise CatalogConnectionError(f"catalog query failed: {e}", target) from e
    finally:
        await conn.close()
