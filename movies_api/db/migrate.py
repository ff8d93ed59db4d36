"""
Movies API – Database Migration CLI
====================================
Gestión del esquema MySQL con migraciones versionadas.

USO:
    # Crear migrations.yml en el directorio actual
    movies-migrate init

    # Nueva migración vacía (CamelCase)
    movies-migrate create CreateMoviesTable

    # Aplicar pendientes en un entorno
    movies-migrate migrate -e development

    # Revertir la última / hasta una versión
    movies-migrate rollback -e development
    movies-migrate rollback -e development -t 0

    # Ver estado
    movies-migrate status -e development

También: python -m movies_api.db.migrate <comando>

El .env se carga antes de leer migrations.yml, así que la CLI usa las
mismas credenciales DATABASE_* que la API.

EXIT STATUS: 0 = OK, 1 = error (configuración, migración o MySQL).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

import pymysql

from movies_api.db.adapter import MySQLAdapter
from movies_api.db.config import DEFAULT_CONFIG_FILE, MigrationConfig
from movies_api.db.manager import MigrationManager, create_migration_file
from movies_api.db.templates import CONFIG_TEMPLATE
from movies_api.domain.exceptions import ConfigurationError, MoviesApiError
from movies_api.infrastructure.persistence.connection import create_connection
from movies_api.shared.config.env import load_env
from movies_api.shared.logging.logger import get_logger, setup_logging

logger = get_logger("db.migrate")

ManagerAction = Callable[[MigrationManager], Awaitable[Any]]


def build_adapter(connection: Any, log_table: str) -> MySQLAdapter:
    return MySQLAdapter(connection, log_table=log_table)


async def run_with_manager(config: MigrationConfig, environment: Optional[str], action: ManagerAction) -> Any:
    """Abre la conexión del entorno, ejecuta `action` y cierra."""
    db = config.environment(environment)
    logger.info(
        f"Entorno: {environment or config.default_environment} "
        f"({db['user']}@{db['host']}/{db['dbname']})"
    )
    conn = await create_connection(db, charset=db["charset"], autocommit=False)
    try:
        manager = MigrationManager(build_adapter(conn, config.log_table), config.migrations_path)
        return await action(manager)
    finally:
        conn.close()


# ─── Comandos ─────────────────────────────────────────────────────────────

def write_config_template(path: Path) -> Path:
    path = Path(path)
    if path.is_dir():
        path = path / DEFAULT_CONFIG_FILE
    if path.exists():
        raise ConfigurationError(f"{path} ya existe; no se sobrescribe", source=str(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    return path


def cmd_init(args: argparse.Namespace) -> int:
    path = write_config_template(Path(args.path))
    logger.info(f"📝 Configuración creada: {path}")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    config = MigrationConfig.from_file(args.configuration)
    create_migration_file(config.migrations_path, args.name)
    return 0


def cmd_migrate(args: argparse.Namespace) -> int:
    config = MigrationConfig.from_file(args.configuration)
    asyncio.run(run_with_manager(
        config, args.environment, lambda manager: manager.migrate(target=args.target)
    ))
    return 0


def cmd_rollback(args: argparse.Namespace) -> int:
    config = MigrationConfig.from_file(args.configuration)
    asyncio.run(run_with_manager(
        config, args.environment, lambda manager: manager.rollback(target=args.target)
    ))
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    config = MigrationConfig.from_file(args.configuration)
    statuses = asyncio.run(run_with_manager(config, args.environment, lambda manager: manager.status()))

    if not statuses:
        logger.info("No hay migraciones")
        return 0

    logger.info(" Estado  Versión         Iniciada             Terminada            Nombre")
    logger.info("-" * 80)
    for s in statuses:
        state = "   up" if s.applied else " down"
        started = s.start_time.strftime("%Y-%m-%d %H:%M:%S") if s.start_time else " " * 19
        ended = s.end_time.strftime("%Y-%m-%d %H:%M:%S") if s.end_time else " " * 19
        suffix = "  ** ARCHIVO NO ENCONTRADO **" if s.missing else ""
        logger.info(f"{state}   {s.version}  {started}  {ended}  {s.name}{suffix}")

    pending = sum(1 for s in statuses if not s.applied)
    if pending:
        logger.info(f"📋 Migraciones pendientes: {pending}")
    else:
        logger.info("✅ No hay migraciones pendientes")
    return 0


# ─── Parser ───────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="movies-migrate", description="Movies API Database Migrations"
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Archivo .env a cargar (por defecto se busca desde el cwd)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Loguear SQL ejecutado")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Crear migrations.yml")
    init.add_argument("path", nargs="?", default=".", help="Directorio o archivo destino")
    init.set_defaults(func=cmd_init)

    def with_config(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument(
            "-c", "--configuration",
            default=DEFAULT_CONFIG_FILE,
            help="Archivo de configuración (default: migrations.yml)",
        )
        return p

    def with_environment(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("-e", "--environment", default=None, help="Entorno destino")
        return p

    create = with_config(sub.add_parser("create", help="Crear una migración nueva"))
    create.add_argument("name", help="Nombre de la clase en CamelCase")
    create.set_defaults(func=cmd_create)

    migrate = with_environment(with_config(sub.add_parser("migrate", help="Aplicar migraciones pendientes")))
    migrate.add_argument("-t", "--target", type=int, default=None, help="Versión objetivo")
    migrate.set_defaults(func=cmd_migrate)

    rollback = with_environment(with_config(sub.add_parser("rollback", help="Revertir migraciones")))
    rollback.add_argument("-t", "--target", type=int, default=None, help="Revertir hasta esta versión")
    rollback.set_defaults(func=cmd_rollback)

    status = with_environment(with_config(sub.add_parser("status", help="Estado de las migraciones")))
    status.set_defaults(func=cmd_status)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "INFO")
    load_env(args.env_file)

    try:
        return args.func(args)
    except MoviesApiError as e:
        logger.error(f"❌ {e.message}")
        return 1
    except pymysql.err.Error as e:
        logger.error(f"❌ Error de MySQL: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
