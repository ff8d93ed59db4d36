"""
Movies API – Schema builder
============================
Operaciones de esquema declarativas para las migraciones.

Una migración NO ejecuta SQL directamente: describe operaciones
(crear tabla, agregar columna, renombrar...) que el manager aplica
después a través del adapter. Cada operación sabe:

- generar su DDL MySQL (compilado con SQLAlchemy Core, dialecto mysql)
- devolver su operación inversa, si existe (para revertir change())

USO dentro de una migración:
    self.table("movies") \\
        .add_column("name", "text") \\
        .add_column("year", "text") \\
        .create()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    MetaData,
    Numeric,
    String,
    Text,
)
from sqlalchemy import Table as SATable
from sqlalchemy.dialects import mysql
from sqlalchemy.schema import CreateColumn, CreateTable, DropTable
from sqlalchemy.types import TypeEngine

from movies_api.domain.exceptions import InvalidMigrationError, IrreversibleMigrationError

if TYPE_CHECKING:
    from movies_api.db.migration import AbstractMigration

DIALECT = mysql.dialect()

DEFAULT_ENGINE = "InnoDB"
DEFAULT_CHARSET = "utf8mb4"


# ─── Tipos de columna ─────────────────────────────────────────────────────

def _string(options: Dict[str, Any]) -> TypeEngine:
    return String(options.get("limit", 255))


def _decimal(options: Dict[str, Any]) -> TypeEngine:
    return Numeric(precision=options.get("precision", 10), scale=options.get("scale", 0))


COLUMN_TYPES = {
    "string": _string,
    "text": lambda options: Text(),
    "integer": lambda options: Integer(),
    "biginteger": lambda options: BigInteger(),
    "boolean": lambda options: Boolean(),
    "date": lambda options: Date(),
    "datetime": lambda options: DateTime(),
    "timestamp": lambda options: TIMESTAMP(),
    "float": lambda options: Float(),
    "decimal": _decimal,
}

COLUMN_OPTIONS = {"limit", "null", "default", "precision", "scale", "comment"}


@dataclass(frozen=True)
class ColumnSpec:
    """Columna declarada en una migración (tipo lógico + opciones)."""

    name: str
    type: str
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.type not in COLUMN_TYPES:
            raise InvalidMigrationError(
                f"Tipo de columna no soportado: '{self.type}' "
                f"(válidos: {', '.join(sorted(COLUMN_TYPES))})"
            )
        unknown = set(self.options) - COLUMN_OPTIONS
        if unknown:
            raise InvalidMigrationError(
                f"Opciones de columna desconocidas en '{self.name}': {', '.join(sorted(unknown))}"
            )

    def to_column(self) -> Column:
        default = self.options.get("default")
        if isinstance(default, bool):
            default = "1" if default else "0"
        elif default is not None:
            default = str(default)
        return Column(
            self.name,
            COLUMN_TYPES[self.type](self.options),
            nullable=self.options.get("null", True),
            server_default=default,
            comment=self.options.get("comment"),
        )


def quote(identifier: str) -> str:
    return DIALECT.identifier_preparer.quote(identifier)


def _compile(element) -> str:
    return str(element.compile(dialect=DIALECT)).strip()


# ─── Operaciones ──────────────────────────────────────────────────────────

class Operation:
    """Operación de esquema. Subclases: una por tipo de cambio."""

    def statements(self) -> List[str]:
        raise NotImplementedError

    def inverse(self) -> "Operation":
        raise IrreversibleMigrationError(
            f"'{self.describe()}' no se puede revertir automáticamente; "
            f"usa up()/down() en lugar de change()"
        )

    def describe(self) -> str:
        raise NotImplementedError


@dataclass
class CreateTableOp(Operation):
    table: str
    columns: List[ColumnSpec]
    id_column: Optional[str] = "id"
    primary_key: List[str] = field(default_factory=list)
    engine: str = DEFAULT_ENGINE
    charset: str = DEFAULT_CHARSET

    def to_table(self) -> SATable:
        columns = []
        if self.id_column and not self.primary_key:
            columns.append(Column(self.id_column, Integer, primary_key=True, autoincrement=True))
        for spec in self.columns:
            column = spec.to_column()
            if spec.name in self.primary_key:
                column.primary_key = True
                column.nullable = False
            columns.append(column)
        return SATable(
            self.table,
            MetaData(),
            *columns,
            mysql_engine=self.engine,
            mysql_charset=self.charset,
        )

    def statements(self) -> List[str]:
        return [_compile(CreateTable(self.to_table()))]

    def inverse(self) -> Operation:
        return DropTableOp(self.table)

    def describe(self) -> str:
        return f"createTable({self.table})"


@dataclass
class DropTableOp(Operation):
    table: str

    def statements(self) -> List[str]:
        return [_compile(DropTable(SATable(self.table, MetaData())))]

    def describe(self) -> str:
        return f"dropTable({self.table})"


@dataclass
class AddColumnOp(Operation):
    table: str
    column: ColumnSpec

    def statements(self) -> List[str]:
        column = self.column.to_column()
        SATable(self.table, MetaData(), column)
        return [f"ALTER TABLE {quote(self.table)} ADD COLUMN {_compile(CreateColumn(column))}"]

    def inverse(self) -> Operation:
        return RemoveColumnOp(self.table, self.column.name)

    def describe(self) -> str:
        return f"addColumn({self.table}.{self.column.name})"


@dataclass
class RemoveColumnOp(Operation):
    table: str
    column: str

    def statements(self) -> List[str]:
        return [f"ALTER TABLE {quote(self.table)} DROP COLUMN {quote(self.column)}"]

    def describe(self) -> str:
        return f"removeColumn({self.table}.{self.column})"


@dataclass
class RenameTableOp(Operation):
    table: str
    new_name: str

    def statements(self) -> List[str]:
        return [f"RENAME TABLE {quote(self.table)} TO {quote(self.new_name)}"]

    def inverse(self) -> Operation:
        return RenameTableOp(self.new_name, self.table)

    def describe(self) -> str:
        return f"renameTable({self.table} -> {self.new_name})"


@dataclass
class ExecuteOp(Operation):
    sql: str

    def statements(self) -> List[str]:
        return [self.sql]

    def describe(self) -> str:
        sql = " ".join(self.sql.split())
        return f"execute({sql[:50]})"


# ─── Builder ──────────────────────────────────────────────────────────────

class Table:
    """
    Builder fluido de una tabla.

    Las columnas se acumulan con add_column()/remove_column() y se
    registran en la migración al llamar create() o update().
    """

    def __init__(
        self,
        name: str,
        migration: "AbstractMigration",
        id: Union[bool, str] = True,
        primary_key: Optional[Union[str, List[str]]] = None,
        engine: str = DEFAULT_ENGINE,
        charset: str = DEFAULT_CHARSET,
    ):
        self.name = name
        self._migration = migration
        if id is True:
            self._id_column: Optional[str] = "id"
        else:
            self._id_column = id or None
        if isinstance(primary_key, str):
            primary_key = [primary_key]
        self._primary_key = list(primary_key or [])
        self._engine = engine
        self._charset = charset
        self._pending_add: List[ColumnSpec] = []
        self._pending_remove: List[str] = []

    def add_column(self, name: str, type: str, **options: Any) -> "Table":
        self._pending_add.append(ColumnSpec(name, type, options))
        return self

    def remove_column(self, name: str) -> "Table":
        self._pending_remove.append(name)
        return self

    def rename(self, new_name: str) -> "Table":
        self._migration.record(RenameTableOp(self.name, new_name))
        self.name = new_name
        return self

    def create(self) -> None:
        if not self._pending_add and not self._id_column:
            raise InvalidMigrationError(f"La tabla '{self.name}' no tiene columnas")
        missing = [pk for pk in self._primary_key if pk not in {c.name for c in self._pending_add}]
        if missing:
            raise InvalidMigrationError(
                f"Primary key sobre columnas no declaradas en '{self.name}': {', '.join(missing)}"
            )
        self._migration.record(CreateTableOp(
            table=self.name,
            columns=list(self._pending_add),
            id_column=self._id_column,
            primary_key=list(self._primary_key),
            engine=self._engine,
            charset=self._charset,
        ))
        self._reset()

    def update(self) -> None:
        for name in self._pending_remove:
            self._migration.record(RemoveColumnOp(self.name, name))
        for spec in self._pending_add:
            self._migration.record(AddColumnOp(self.name, spec))
        self._reset()

    def drop(self) -> None:
        self._migration.record(DropTableOp(self.name))

    def _reset(self) -> None:
        self._pending_add = []
        self._pending_remove = []
