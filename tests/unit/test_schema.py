from __future__ import annotations

import pytest


@pytest.mark.parametrize(
    ("column_type", "expected"),
    [("text", "TEXT"), ("number", "INTEGER"), ("boolean", "INTEGER")],
)
def test_storage_type_maps_every_tag(column_type: str, expected: str) -> None:
    from fixture_db.schema import ColumnType, storage_type

    assert storage_type(ColumnType(column_type)) == expected
    assert storage_type(column_type) == expected


def test_storage_type_rejects_unknown_tag() -> None:
    from fixture_db.errors import SchemaCompilationError
    from fixture_db.schema import storage_type

    with pytest.raises(SchemaCompilationError, match="varchar"):
        storage_type("varchar")


def test_schema_creation_order_and_table_names() -> None:
    from fixture_db.schema import SCHEMA, TABLES

    names = [t.name for t in SCHEMA]
    assert names == ["currencies", "accounts", "transactions", "categories", "sub_categories"]
    assert names[0] == TABLES.currencies


def test_column_names_are_unique_per_table() -> None:
    from fixture_db.schema import SCHEMA

    for table in SCHEMA:
        names = list(table.column_names())
        assert len(names) == len(set(names)), table.name


def test_transactions_optional_columns() -> None:
    from fixture_db.schema import TRANSACTIONS_TABLE

    assert [c.name for c in TRANSACTIONS_TABLE.optional_columns()] == [
        "note",
        "transfer_account_id",
        "sub_category_id",
    ]
    assert [c.name for c in TRANSACTIONS_TABLE.required_columns()] == [
        "amount",
        "account_id",
        "category_id",
        "created_at",
    ]


def test_specs_are_immutable() -> None:
    from dataclasses import FrozenInstanceError

    from fixture_db.schema import CURRENCIES_TABLE

    with pytest.raises(FrozenInstanceError):
        CURRENCIES_TABLE.name = "other"  # type: ignore[misc]
