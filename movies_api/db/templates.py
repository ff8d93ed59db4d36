"""Plantillas que escribe la CLI (`init` y `create`)."""

CONFIG_TEMPLATE = """\
# Configuración de migraciones.
# Los valores ${VAR} se leen del entorno después de cargar el .env.
paths:
  migrations: "%%CONFIG_DIR%%/db/migrations"

environments:
  default_migration_table: phinxlog
  default_environment: development

  development:
    adapter: mysql
    host: "${DATABASE_HOST}"
    name: "${DATABASE_NAME}"
    user: "${DATABASE_USER}"
    pass: "${DATABASE_PASS}"
    port: "${DATABASE_PORT}"
    charset: utf8mb4

  testing:
    adapter: mysql
    host: "${DATABASE_HOST}"
    name: "${DATABASE_NAME}_test"
    user: "${DATABASE_USER}"
    pass: "${DATABASE_PASS}"
    port: "${DATABASE_PORT}"
    charset: utf8mb4
"""

MIGRATION_TEMPLATE = '''\
from movies_api.db.migration import AbstractMigration


class {class_name}(AbstractMigration):

    def change(self):
        """
        Operaciones reversibles: create(), add_column() + update(), rename().

        Para operaciones sin inversa usa up()/down() en su lugar.
        """
        pass
'''
