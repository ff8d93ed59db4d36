"""
Fixtures compartidas: entorno aislado y dobles en memoria de la conexión
aiomysql y del adapter de migraciones. Ningún test necesita MySQL.
"""

from __future__ import annotations

import asyncio
import os
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from movies_api.container import reset_container
from movies_api.db.schema import (
    AddColumnOp,
    CreateTableOp,
    DropTableOp,
    ExecuteOp,
    Operation,
    RemoveColumnOp,
    RenameTableOp,
)
from movies_api.shared.config.env import DATABASE_KEYS, reset_loaded
from movies_api.shared.config.settings import get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Cada test arranca sin DATABASE_* y en un cwd vacío."""
    saved = dict(os.environ)
    for key in DATABASE_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_loaded()
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(saved)
    reset_loaded()
    get_settings.cache_clear()
    reset_container()


# ─── aiomysql fake ────────────────────────────────────────────────────────

class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self._conn = connection
        self.lastrowid: Optional[int] = None
        self._result: List[Dict[str, Any]] = []

    async def __aenter__(self):
        self._conn.in_flight += 1
        self._conn.max_in_flight = max(self._conn.max_in_flight, self._conn.in_flight)
        return self

    async def __aexit__(self, *exc):
        self._conn.in_flight -= 1
        return False

    async def execute(self, sql, params=None):
        self._conn.executed.append((sql, params))
        if self._conn.latency:
            await asyncio.sleep(self._conn.latency)
        if self._conn.error is not None:
            raise self._conn.error
        self._result = self._conn.results.pop(0) if self._conn.results else []
        if sql.lstrip().upper().startswith("INSERT"):
            self._conn.next_id += 1
            self.lastrowid = self._conn.next_id
        return len(self._result)

    async def fetchall(self):
        return list(self._result)

    async def fetchone(self):
        return self._result[0] if self._result else None


class FakeConnection:
    """Graba SQL ejecutado y devuelve resultados encolados en orden."""

    def __init__(self, results=None, autocommit: bool = True, error: Exception = None, latency: float = 0):
        self.results: List[List[Dict[str, Any]]] = list(results or [])
        self.executed: List[tuple] = []
        self.autocommit = autocommit
        self.error = error
        self.next_id = 0
        self.commits = 0
        self.rollbacks = 0
        self.begins = 0
        self.closed = False
        self.latency = latency
        self.in_flight = 0
        self.max_in_flight = 0

    def cursor(self):
        return FakeCursor(self)

    def get_autocommit(self):
        return self.autocommit

    async def begin(self):
        self.begins += 1

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connection():
    return FakeConnection()


# ─── Adapter de migraciones en memoria ────────────────────────────────────

class FakeAdapter:
    """
    Simula el esquema (tablas → columnas) y la tabla de versiones.

    `schema_ops` cuenta cada operación de esquema aplicada.
    """

    def __init__(self, log_table: str = "phinxlog", fail_on: Optional[str] = None):
        self.log_table = log_table
        self.tables: Dict[str, List[str]] = {}
        self.log: Dict[int, Dict[str, Any]] = {}
        self.schema_ops: List[Operation] = []
        self.fail_on = fail_on
        self.begins = 0
        self.commits = 0
        self.rollbacks = 0
        self._pending_log: Dict[int, Optional[Dict[str, Any]]] = {}

    async def ensure_log_table(self):
        self.tables.setdefault(self.log_table, ["version", "migration_name", "start_time", "end_time"])

    async def applied_versions(self):
        return dict(self.log)

    async def begin(self):
        self.begins += 1
        self._pending_log = {}

    async def commit(self):
        self.commits += 1
        for version, row in self._pending_log.items():
            if row is None:
                self.log.pop(version, None)
            else:
                self.log[version] = row
        self._pending_log = {}

    async def rollback(self):
        self.rollbacks += 1
        self._pending_log = {}

    async def apply(self, op: Operation):
        if self.fail_on and self.fail_on in op.describe():
            raise RuntimeError(f"fallo simulado en {op.describe()}")
        self.schema_ops.append(op)
        if isinstance(op, CreateTableOp):
            if op.table in self.tables:
                raise RuntimeError(f"Table '{op.table}' already exists")
            columns = ([op.id_column] if op.id_column and not op.primary_key else [])
            self.tables[op.table] = columns + [c.name for c in op.columns]
        elif isinstance(op, DropTableOp):
            self.tables.pop(op.table)
        elif isinstance(op, RenameTableOp):
            self.tables[op.new_name] = self.tables.pop(op.table)
        elif isinstance(op, AddColumnOp):
            self.tables[op.table].append(op.column.name)
        elif isinstance(op, RemoveColumnOp):
            self.tables[op.table].remove(op.column)
        elif isinstance(op, ExecuteOp):
            pass

    async def record_migration(self, version, name, start_time, end_time):
        self._pending_log[version] = {
            "version": version,
            "migration_name": name,
            "start_time": start_time,
            "end_time": end_time,
        }

    async def remove_migration(self, version):
        self._pending_log[version] = None


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


# ─── Archivos de migración ────────────────────────────────────────────────

def write_migration(directory: Path, version: int, snake_name: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    class_name = "".join(part.capitalize() for part in snake_name.split("_"))
    source = (
        "from movies_api.db.migration import AbstractMigration\n\n\n"
        f"class {class_name}(AbstractMigration):\n"
        + textwrap.indent(textwrap.dedent(body).strip() + "\n", "    ")
    )
    path = directory / f"{version}_{snake_name}.py"
    path.write_text(source, encoding="utf-8")
    return path


CREATE_MOVIES = """
def change(self):
    self.table("movies") \\
        .add_column("name", "text") \\
        .add_column("year", "text") \\
        .add_column("director", "text") \\
        .add_column("summary", "text") \\
        .create()
"""

ADD_RATING = """
def change(self):
    self.table("movies").add_column("rating", "string", limit=10).update()
"""


@pytest.fixture
def migrations_dir(tmp_path):
    path = tmp_path / "db" / "migrations"
    write_migration(path, 20240612183045, "create_movies_table", CREATE_MOVIES)
    write_migration(path, 20240701090000, "add_rating_to_movies", ADD_RATING)
    return path
