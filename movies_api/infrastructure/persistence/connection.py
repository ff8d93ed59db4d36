"""
Movies API – MySQL connection factory
======================================
Abre UNA conexión aiomysql a partir del bloque `db` de settings.

COMPORTAMIENTO FIJO:
- Errores: el driver lanza excepciones (pymysql.err.*); aquí no se
  capturan ni se reintentan.
- Filas: DictCursor, cada fila es un dict {columna: valor}.

Sin pool, sin reintentos, sin timeout propio. El contenedor es quien
decide cuándo llamar a esta fábrica (una sola vez por proceso).
"""

from __future__ import annotations

from typing import Any, Dict

import aiomysql

from movies_api.shared.logging.logger import get_logger

logger = get_logger("infrastructure.connection")

DEFAULT_PORT = 3306


async def create_connection(
    db: Dict[str, Any],
    charset: str = "utf8mb4",
    autocommit: bool = True,
) -> aiomysql.Connection:
    """
    Conecta a MySQL con los valores de `db` (host, dbname, user, pass, port).

    Los valores vacíos se pasan tal cual: un .env incompleto aparece
    como error de conexión del driver.
    """
    port = db.get("port") or DEFAULT_PORT
    logger.info(
        "Conectando a MySQL %s@%s:%s/%s",
        db.get("user"), db.get("host"), port, db.get("dbname"),
    )
    return await aiomysql.connect(
        host=db.get("host"),
        port=int(port),
        user=db.get("user"),
        password=db.get("pass"),
        db=db.get("dbname"),
        charset=charset,
        autocommit=autocommit,
        cursorclass=aiomysql.DictCursor,
    )
