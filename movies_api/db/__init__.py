"""
Movies API – Database Package
==============================
Herramienta de migraciones MySQL.

ESTRUCTURA:
    db/
    ├── __init__.py         # Este archivo
    ├── adapter.py          # Ejecución de DDL + tabla de versiones
    ├── config.py           # Lectura de migrations.yml
    ├── manager.py          # migrate / rollback / status
    ├── migrate.py          # CLI
    ├── migration.py        # AbstractMigration
    ├── schema.py           # Builder de tablas y operaciones
    ├── templates.py        # Plantillas de init/create
    └── migrations/         # Archivos YYYYMMDDHHMMSS_nombre.py

COMANDOS:
    movies-migrate migrate -e development
    movies-migrate rollback -e development
    movies-migrate status -e development
"""

from movies_api.db.migration import AbstractMigration

__all__ = ["AbstractMigration"]
