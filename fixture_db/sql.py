"""
DDL/DML compilation for the fixture schema.

Statements are plain SQLite text. Identifiers come from the schema and are
validated; values only ever travel as ``?`` parameters.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from fixture_db.errors import ArityMismatch, SchemaCompilationError
from fixture_db.schema import SYSTEM_COLUMNS, TableSpec, storage_type

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class InsertStatement:
    sql: str
    params: tuple[Any, ...]


def _ident(name: str, *, operation: str) -> str:
    if not isinstance(name, str) or not _IDENT_RE.match(name):
        raise SchemaCompilationError(f"invalid identifier {name!r}", operation=operation)
    return name


def compile_create_table(table: TableSpec) -> str:
    op = "compile_create_table"
    table_name = _ident(table.name, operation=op)

    parts = [f"{c.name} {c.ddl}" for c in SYSTEM_COLUMNS]
    seen = {c.name for c in SYSTEM_COLUMNS}
    for col in table.columns:
        name = _ident(col.name, operation=op)
        if name in seen:
            raise SchemaCompilationError(f"duplicate column {table_name}.{name}", operation=op)
        seen.add(name)
        part = f"{name} {storage_type(col.type)}"
        if not col.is_optional:
            part += " NOT NULL"
        parts.append(part)

    return f"CREATE TABLE {table_name} ({', '.join(parts)})"


def compile_create_indexes(table: TableSpec) -> list[str]:
    op = "compile_create_indexes"
    table_name = _ident(table.name, operation=op)
    return [
        f"CREATE INDEX idx_{table_name}_{_ident(c.name, operation=op)} ON {table_name} ({c.name})"
        for c in table.columns
        if c.is_indexed
    ]


def compile_insert(table_name: str, columns: Sequence[str], values: Sequence[Any]) -> InsertStatement:
    op = "compile_insert"
    if len(columns) != len(values):
        raise ArityMismatch(
            f"{table_name}: {len(columns)} columns but {len(values)} values",
            operation=op,
        )
    if not columns:
        raise ArityMismatch(f"{table_name}: no columns to insert", operation=op)

    names = ", ".join(_ident(c, operation=op) for c in columns)
    placeholders = ", ".join("?" for _ in values)
    sql = f"INSERT INTO {_ident(table_name, operation=op)} ({names}) VALUES ({placeholders})"
    return InsertStatement(sql=sql, params=tuple(values))


def compile_set_user_version(version: int) -> str:
    # PRAGMA does not accept bound parameters.
    return f"PRAGMA user_version = {int(version)}"
