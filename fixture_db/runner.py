"""
Fixture database runner.

One run = reset-by-replace: delete the old file, create a new one, create every
table in schema order, insert the currency catalog and, with ``--fixtures``,
sample accounts pointing at those currencies. Statements run one at a time on a
single connection owned by the runner.
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from fixture_db.catalog import DEFAULT_CATALOG, SeedCatalog
from fixture_db.errors import (
    FixtureError,
    LookupMiss,
    StorageAccessError,
    StorageConnectionError,
    StorageOperationError,
)
from fixture_db.ids import generate_id
from fixture_db.logging import configure_logging, logger
from fixture_db.schema import SCHEMA, TABLES, TableSpec
from fixture_db.settings import SETTINGS
from fixture_db.sql import (
    compile_create_indexes,
    compile_create_table,
    compile_insert,
    compile_set_user_version,
)


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    STORAGE_RESET = "storage_reset"
    CONNECTED = "connected"
    SCHEMA_CREATED = "schema_created"
    BASE_SEEDED = "base_seeded"
    EXTENDED_SEEDED = "extended_seeded"
    CLOSED = "closed"


@dataclass(frozen=True)
class RunResult:
    ok: bool
    state: RunState
    history: tuple[RunState, ...]
    currency_ids: dict[str, str] = field(default_factory=dict)
    account_ids: dict[str, str] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    error: FixtureError | None = None


class MigrationRunner:
    def __init__(
        self,
        db_path: Path | str,
        *,
        schema: Sequence[TableSpec] = SCHEMA,
        catalog: SeedCatalog = DEFAULT_CATALOG,
        with_fixtures: bool = False,
        user_version: int = 1,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self.db_path = Path(db_path)
        self.schema = tuple(schema)
        self.catalog = catalog
        self.with_fixtures = with_fixtures
        self.user_version = user_version
        self.id_factory = id_factory

        self.state = RunState.NOT_STARTED
        self._history: list[RunState] = [RunState.NOT_STARTED]
        self._currency_ids: dict[str, str] = {}
        self._account_ids: dict[str, str] = {}
        self._counts: dict[str, int] = {}

    def run(self) -> RunResult:
        """Rebuild the database. Errors are logged and returned, never raised."""
        self.state = RunState.NOT_STARTED
        self._history = [RunState.NOT_STARTED]
        self._currency_ids = {}
        self._account_ids = {}
        self._counts = {}

        log = logger.bind(db_path=str(self.db_path), with_fixtures=self.with_fixtures)
        try:
            self._reset_storage()
            self._build()
        except FixtureError as e:
            log.error("fixture_run_failed", operation=e.operation, error=str(e), state=self.state.value)
            return self._result(error=e)

        log.info("fixture_run_finished", counts=self._counts)
        return self._result()

    def run_or_raise(self) -> RunResult:
        result = self.run()
        if result.error is not None:
            raise result.error
        return result

    # -- states ----------------------------------------------------------------

    def _advance(self, state: RunState) -> None:
        self.state = state
        self._history.append(state)
        logger.debug("fixture_state", state=state.value)

    def _reset_storage(self) -> None:
        path = self.db_path
        try:
            existed = path.exists()
            # A file that vanished between the check and the unlink is fine too.
            path.unlink(missing_ok=True)
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageAccessError(f"cannot reset {path}: {e}", operation="reset_storage") from e
        if existed:
            logger.info("storage_removed", path=str(path))
        self._advance(RunState.STORAGE_RESET)

    def _open_engine(self) -> Engine:
        # NullPool: closing the connection really closes the SQLite file handle.
        # URL.create keeps "?" and "#" in the path out of the query string.
        url = sa.engine.URL.create("sqlite", database=str(self.db_path))
        return sa.create_engine(url, future=True, poolclass=NullPool)

    def _build(self) -> None:
        engine = self._open_engine()
        try:
            try:
                conn = engine.connect()
            except SQLAlchemyError as e:
                raise StorageConnectionError(
                    f"cannot open {self.db_path}: {_db_message(e)}", operation="connect"
                ) from e
            try:
                self._advance(RunState.CONNECTED)
                logger.info("storage_connected", path=str(self.db_path))
                self._execute(conn, "set_user_version", compile_set_user_version(self.user_version))
                self._create_schema(conn)
                self._seed_currencies(conn)
                if self.with_fixtures:
                    self._seed_accounts(conn)
                self._counts = self._count_rows(conn)
            finally:
                conn.close()
                self._advance(RunState.CLOSED)
                logger.info("storage_closed", path=str(self.db_path))
        finally:
            engine.dispose()

    def _create_schema(self, conn: Connection) -> None:
        for table in self.schema:
            self._execute(conn, "create_table", compile_create_table(table))
            for stmt in compile_create_indexes(table):
                self._execute(conn, "create_index", stmt)
            logger.info("table_created", table=table.name)
        conn.commit()
        self._advance(RunState.SCHEMA_CREATED)

    def _seed_currencies(self, conn: Connection) -> None:
        for currency in self.catalog.currencies:
            stmt = compile_insert(
                TABLES.currencies,
                ["id", "name", "alpha_code"],
                [self.id_factory(), currency.name, currency.alpha_code],
            )
            self._execute(conn, "insert_currency", stmt.sql, stmt.params)
        conn.commit()
        self._currency_ids = self._load_currency_ids(conn)
        logger.info("currencies_seeded", rows=len(self.catalog.currencies))
        self._advance(RunState.BASE_SEEDED)

    def _seed_accounts(self, conn: Connection) -> None:
        for account in self.catalog.accounts:
            currency_id = self._currency_ids.get(account.currency_name)
            if currency_id is None:
                raise LookupMiss(
                    f"account {account.name!r} references unknown currency {account.currency_name!r}",
                    operation="resolve_currency",
                )
            account_id = self.id_factory()
            stmt = compile_insert(
                TABLES.accounts,
                ["id", "name", "currency_id", "balance"],
                [account_id, account.name, currency_id, account.balance],
            )
            self._execute(conn, "insert_account", stmt.sql, stmt.params)
            self._account_ids[account.name] = account_id
        conn.commit()
        logger.info("accounts_seeded", rows=len(self.catalog.accounts))
        self._advance(RunState.EXTENDED_SEEDED)

    # -- storage helpers -------------------------------------------------------

    def _execute(self, conn: Connection, operation: str, sql: str, params: tuple[Any, ...] = ()) -> None:
        try:
            conn.exec_driver_sql(sql, params)
        except SQLAlchemyError as e:
            logger.error("statement_failed", operation=operation, sql=sql, error=_db_message(e))
            raise StorageOperationError(_db_message(e), operation=operation) from e

    def _load_currency_ids(self, conn: Connection) -> dict[str, str]:
        q = sa.text(f"SELECT name, id FROM {TABLES.currencies} ORDER BY rowid")
        try:
            rows = conn.execute(q).all()
        except SQLAlchemyError as e:
            raise StorageOperationError(_db_message(e), operation="load_currency_ids") from e
        ids: dict[str, str] = {}
        for name, currency_id in rows:
            # First inserted row wins on duplicate names.
            ids.setdefault(name, currency_id)
        return ids

    def _count_rows(self, conn: Connection) -> dict[str, int]:
        counts = {}
        try:
            for table in self.schema:
                counts[table.name] = conn.execute(sa.text(f"SELECT COUNT(1) FROM {table.name}")).scalar_one()
        except SQLAlchemyError as e:
            raise StorageOperationError(_db_message(e), operation="count_rows") from e
        return counts

    def _result(self, error: FixtureError | None = None) -> RunResult:
        return RunResult(
            ok=error is None,
            state=self.state,
            history=tuple(self._history),
            currency_ids=dict(self._currency_ids),
            account_ids=dict(self._account_ids),
            counts=dict(self._counts),
            error=error,
        )


def _db_message(e: SQLAlchemyError) -> str:
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rebuild the local fixture database from scratch.")
    parser.add_argument("--fixtures", action="store_true", help="Also insert sample accounts.")
    parser.add_argument("--db-path", type=Path, default=SETTINGS.db_path)
    parser.add_argument("--log-level", default=SETTINGS.log_level)
    args = parser.parse_args(argv)

    configure_logging(args.log_level, json_logs=SETTINGS.log_json)
    runner = MigrationRunner(
        args.db_path,
        with_fixtures=bool(args.fixtures),
        user_version=SETTINGS.user_version,
    )
    result = runner.run()
    if not result.ok:
        return 1

    print(json.dumps({"db_path": str(runner.db_path), "counts": result.counts}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
