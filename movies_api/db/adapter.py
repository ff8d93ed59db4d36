"""
Movies API – MySQL migration adapter
=====================================
Ejecuta las operaciones de esquema y mantiene la tabla de versiones
(`phinxlog` por defecto) sobre una conexión aiomysql.

TABLA DE VERSIONES:
    version         BIGINT PK   → timestamp del archivo (YYYYMMDDHHMMSS)
    migration_name  VARCHAR(100)
    start_time      TIMESTAMP NULL
    end_time        TIMESTAMP NULL

NOTA: MySQL hace commit implícito tras cada DDL, así que la transacción
de una migración solo protege de verdad la escritura en la tabla de
versiones y los DML.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import TIMESTAMP, BigInteger, Column, MetaData, String, Table
from sqlalchemy.schema import CreateTable

from movies_api.db.schema import DIALECT, DEFAULT_ENGINE, Operation, quote
from movies_api.shared.logging.logger import get_logger

logger = get_logger("db.adapter")


def log_table_ddl(name: str) -> str:
    """DDL idempotente de la tabla de versiones."""
    table = Table(
        name,
        MetaData(),
        Column("version", BigInteger, primary_key=True, autoincrement=False),
        Column("migration_name", String(100), nullable=True),
        Column("start_time", TIMESTAMP, nullable=True),
        Column("end_time", TIMESTAMP, nullable=True),
        mysql_engine=DEFAULT_ENGINE,
    )
    return str(CreateTable(table, if_not_exists=True).compile(dialect=DIALECT)).strip()


class MySQLAdapter:
    """
    Adapter sobre una conexión aiomysql con DictCursor.

    El adapter no abre ni cierra la conexión: la recibe del caller.
    """

    def __init__(self, connection: Any, log_table: str = "phinxlog"):
        self._conn = connection
        self.log_table = log_table

    # ─── Transacciones ─────────────────────────────────────────────────

    async def begin(self) -> None:
        await self._conn.begin()

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()

    # ─── SQL ───────────────────────────────────────────────────────────

    async def execute(self, sql: str, params: tuple = ()) -> int:
        async with self._conn.cursor() as cursor:
            return await cursor.execute(sql, params or None)

    async def apply(self, operation: Operation) -> None:
        """Ejecuta todas las sentencias de una operación de esquema."""
        for statement in operation.statements():
            logger.debug("SQL: %s", statement)
            await self.execute(statement)

    # ─── Tabla de versiones ────────────────────────────────────────────

    async def ensure_log_table(self) -> None:
        """Crea la tabla de versiones si no existe."""
        await self.execute(log_table_ddl(self.log_table))
        await self.commit()

    async def applied_versions(self) -> Dict[int, Dict[str, Any]]:
        """Migraciones registradas, indexadas por versión."""
        async with self._conn.cursor() as cursor:
            await cursor.execute(
                f"SELECT `version`, `migration_name`, `start_time`, `end_time` "
                f"FROM {quote(self.log_table)} ORDER BY `version`"
            )
            rows = await cursor.fetchall()
        return {int(row["version"]): row for row in rows}

    async def record_migration(
        self, version: int, name: str, start_time: datetime, end_time: datetime
    ) -> None:
        await self.execute(
            f"INSERT INTO {quote(self.log_table)} "
            f"(`version`, `migration_name`, `start_time`, `end_time`) "
            f"VALUES (%s, %s, %s, %s)",
            (version, name[:100], start_time, end_time),
        )

    async def remove_migration(self, version: int) -> None:
        await self.execute(
            f"DELETE FROM {quote(self.log_table)} WHERE `version` = %s",
            (version,),
        )
