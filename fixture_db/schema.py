"""
Declarative schema of the fixture database.

Tables are listed in creation order. Cross-table references (``*_id`` columns)
are plain TEXT columns holding generated ids; no FOREIGN KEY constraints exist.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from fixture_db.errors import SchemaCompilationError


class ColumnType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"


StorageType = Literal["TEXT", "INTEGER"]

_STORAGE_TYPES: dict[ColumnType, StorageType] = {
    ColumnType.TEXT: "TEXT",
    ColumnType.NUMBER: "INTEGER",
    # SQLite has no boolean storage class.
    ColumnType.BOOLEAN: "INTEGER",
}


def storage_type(column_type: ColumnType) -> StorageType:
    try:
        return _STORAGE_TYPES[ColumnType(column_type)]
    except ValueError as e:
        raise SchemaCompilationError(f"unknown column type {column_type!r}", operation="storage_type") from e


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type: ColumnType
    is_optional: bool = False
    is_indexed: bool = False


@dataclass(frozen=True)
class TableSpec:
    name: str
    columns: tuple[ColumnSpec, ...] = ()

    def column_names(self) -> Iterator[str]:
        return (c.name for c in self.columns)

    def required_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if not c.is_optional]

    def optional_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.is_optional]


@dataclass(frozen=True)
class SystemColumn:
    name: str
    ddl: str


# Added to every table ahead of the declared columns. `_status` and `_changed`
# are reserved for the app's sync layer and stay NULL here.
SYSTEM_COLUMNS: tuple[SystemColumn, ...] = (
    SystemColumn("id", "TEXT PRIMARY KEY"),
    SystemColumn("_status", "TEXT"),
    SystemColumn("_changed", "TEXT"),
)


class TABLES:
    currencies = "currencies"
    accounts = "accounts"
    transactions = "transactions"
    categories = "categories"
    sub_categories = "sub_categories"


CURRENCIES_TABLE = TableSpec(
    name=TABLES.currencies,
    columns=(
        ColumnSpec("name", ColumnType.TEXT),
        ColumnSpec("alpha_code", ColumnType.TEXT),
    ),
)
ACCOUNTS_TABLE = TableSpec(
    name=TABLES.accounts,
    columns=(
        ColumnSpec("name", ColumnType.TEXT),
        ColumnSpec("currency_id", ColumnType.TEXT, is_indexed=True),
        ColumnSpec("balance", ColumnType.NUMBER),
    ),
)
TRANSACTIONS_TABLE = TableSpec(
    name=TABLES.transactions,
    columns=(
        ColumnSpec("amount", ColumnType.NUMBER),
        ColumnSpec("note", ColumnType.TEXT, is_optional=True),
        ColumnSpec("account_id", ColumnType.TEXT, is_indexed=True),
        ColumnSpec("transfer_account_id", ColumnType.TEXT, is_optional=True),
        ColumnSpec("category_id", ColumnType.TEXT, is_indexed=True),
        ColumnSpec("sub_category_id", ColumnType.TEXT, is_optional=True),
        ColumnSpec("created_at", ColumnType.NUMBER, is_indexed=True),
    ),
)
CATEGORIES_TABLE = TableSpec(
    name=TABLES.categories,
    columns=(
        ColumnSpec("name", ColumnType.TEXT),
        ColumnSpec("icon", ColumnType.TEXT),
        ColumnSpec("color", ColumnType.TEXT),
    ),
)
SUB_CATEGORIES_TABLE = TableSpec(
    name=TABLES.sub_categories,
    columns=(
        ColumnSpec("name", ColumnType.TEXT),
        ColumnSpec("color", ColumnType.TEXT),
        ColumnSpec("category_id", ColumnType.TEXT, is_indexed=True),
    ),
)


SCHEMA: tuple[TableSpec, ...] = (
    CURRENCIES_TABLE,
    ACCOUNTS_TABLE,
    TRANSACTIONS_TABLE,
    CATEGORIES_TABLE,
    SUB_CATEGORIES_TABLE,
)
