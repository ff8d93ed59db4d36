"""Migraciones versionadas; las carga el MigrationManager por ruta."""
