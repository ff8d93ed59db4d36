"""
Movies API – Migration Manager
===============================
Compara la tabla de versiones con los archivos de db/migrations/ y
aplica (o revierte) las diferencias en orden de versión.

ARCHIVOS:
    20240612183045_create_movies_table.py  →  class CreateMoviesTable

IDEMPOTENCIA:
    migrate() solo ejecuta versiones que no están en la tabla de
    versiones. Una segunda ejecución sin archivos nuevos no toca el
    esquema.
"""

from __future__ import annotations

import importlib.util
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from movies_api.db.migration import DOWN, UP, AbstractMigration
from movies_api.db.templates import MIGRATION_TEMPLATE
from movies_api.domain.exceptions import (
    DuplicateMigrationError,
    InvalidMigrationError,
    MigrationError,
)
from movies_api.shared.logging.logger import get_logger

logger = get_logger("db.manager")

MIGRATION_FILE_RE = re.compile(r"^(\d{14})_([a-z0-9_]+)\.py$")
CLASS_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
VERSION_FORMAT = "%Y%m%d%H%M%S"


# ─── Nombres ──────────────────────────────────────────────────────────────

def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def is_valid_class_name(name: str) -> bool:
    return bool(CLASS_NAME_RE.match(name))


# ─── Descubrimiento ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class MigrationFile:
    version: int
    class_name: str
    path: Path

    def load(self) -> AbstractMigration:
        """Importa el archivo y devuelve una instancia de su migración."""
        module_name = f"movies_api_migration_{self.version}"
        spec = importlib.util.spec_from_file_location(module_name, self.path)
        if spec is None or spec.loader is None:
            raise InvalidMigrationError(f"No se pudo cargar {self.path}", path=str(self.path))
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise InvalidMigrationError(
                f"Error al importar {self.path.name}: {type(e).__name__}: {e}",
                path=str(self.path),
            ) from e

        cls = getattr(module, self.class_name, None)
        if not isinstance(cls, type) or not issubclass(cls, AbstractMigration):
            raise InvalidMigrationError(
                f"{self.path.name} debe definir la clase {self.class_name}(AbstractMigration)",
                path=str(self.path),
            )
        return cls(self.version)


def discover_migrations(path: Path) -> List[MigrationFile]:
    """Archivos de migración ordenados por versión."""
    path = Path(path)
    if not path.is_dir():
        logger.warning(f"No existe el directorio de migraciones {path}")
        return []

    migrations: List[MigrationFile] = []
    versions: Dict[int, Path] = {}
    class_names: Dict[str, Path] = {}

    for filepath in sorted(path.glob("*.py")):
        if filepath.name.startswith("_"):
            continue
        match = MIGRATION_FILE_RE.match(filepath.name)
        if not match:
            raise InvalidMigrationError(
                f"Nombre de migración inválido: {filepath.name} "
                f"(esperado YYYYMMDDHHMMSS_nombre_en_snake.py)",
                path=str(filepath),
            )
        version = int(match.group(1))
        class_name = snake_to_camel(match.group(2))

        if version in versions:
            raise DuplicateMigrationError(
                f"Versión duplicada {version}: {versions[version].name} y {filepath.name}",
                version=version,
            )
        if class_name in class_names:
            raise DuplicateMigrationError(
                f"Clase duplicada {class_name}: {class_names[class_name].name} y {filepath.name}",
                version=version,
            )
        versions[version] = filepath
        class_names[class_name] = filepath
        migrations.append(MigrationFile(version, class_name, filepath))

    return sorted(migrations, key=lambda m: m.version)


def create_migration_file(path: Path, class_name: str, now: Optional[datetime] = None) -> Path:
    """
    Escribe una migración vacía a partir de la plantilla.

    Returns:
        Ruta del archivo creado.
    """
    if not is_valid_class_name(class_name):
        raise InvalidMigrationError(
            f"'{class_name}' no es un nombre válido; usa CamelCase (ej: CreateMoviesTable)"
        )
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)

    existing = discover_migrations(path)
    snake = camel_to_snake(class_name)
    if any(m.class_name == snake_to_camel(snake) for m in existing):
        raise DuplicateMigrationError(f"Ya existe una migración {class_name}")

    version = (now or datetime.now(timezone.utc)).strftime(VERSION_FORMAT)
    if any(m.version == int(version) for m in existing):
        raise DuplicateMigrationError(
            f"Ya existe una migración con versión {version}", version=int(version)
        )

    filepath = path / f"{version}_{snake}.py"
    filepath.write_text(MIGRATION_TEMPLATE.format(class_name=class_name), encoding="utf-8")
    logger.info(f"📝 Migración creada: {filepath}")
    return filepath


# ─── Estado ───────────────────────────────────────────────────────────────

@dataclass
class MigrationStatus:
    version: int
    name: str
    applied: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    missing: bool = False


class MigrationManager:
    """
    Orquesta migrate / rollback / status sobre un adapter.

    USO:
        manager = MigrationManager(MySQLAdapter(conn), Path("db/migrations"))
        await manager.migrate()
    """

    def __init__(self, adapter: Any, migrations_path: Path):
        self._adapter = adapter
        self.migrations_path = Path(migrations_path)

    def migrations(self) -> List[MigrationFile]:
        return discover_migrations(self.migrations_path)

    async def status(self) -> List[MigrationStatus]:
        await self._adapter.ensure_log_table()
        applied = await self._adapter.applied_versions()
        result = []
        known = set()
        for mf in self.migrations():
            known.add(mf.version)
            row = applied.get(mf.version) or {}
            result.append(MigrationStatus(
                version=mf.version,
                name=mf.class_name,
                applied=mf.version in applied,
                start_time=row.get("start_time"),
                end_time=row.get("end_time"),
            ))
        for version, row in applied.items():
            if version not in known:
                result.append(MigrationStatus(
                    version=version,
                    name=row.get("migration_name") or "",
                    applied=True,
                    start_time=row.get("start_time"),
                    end_time=row.get("end_time"),
                    missing=True,
                ))
        return sorted(result, key=lambda s: s.version)

    async def migrate(self, target: Optional[int] = None) -> List[int]:
        """
        Aplica las migraciones pendientes hasta `target` (incluida).

        Returns:
            Versiones aplicadas en esta ejecución.
        """
        migrations = self.migrations()
        if target is not None and target not in {m.version for m in migrations}:
            raise MigrationError(f"Versión objetivo desconocida: {target}", version=target)

        await self._adapter.ensure_log_table()
        applied = await self._adapter.applied_versions()

        pending = [
            m for m in migrations
            if m.version not in applied and (target is None or m.version <= target)
        ]
        if not pending:
            logger.info("✅ No hay migraciones pendientes")
            return []

        done = []
        for mf in pending:
            await self._run(mf, UP)
            done.append(mf.version)

        logger.info(f"✅ {len(done)} migraciones ejecutadas")
        return done

    async def rollback(self, target: Optional[int] = None) -> List[int]:
        """
        Revierte la última migración aplicada, o todas las posteriores a
        `target` si se indica (`target=0` revierte todo).

        Returns:
            Versiones revertidas, de la más nueva a la más vieja.
        """
        await self._adapter.ensure_log_table()
        applied = await self._adapter.applied_versions()
        by_version = {m.version: m for m in self.migrations()}

        if target is not None and target != 0 and target not in applied:
            raise MigrationError(f"La versión objetivo {target} no está aplicada", version=target)

        versions = sorted(applied, reverse=True)
        if target is None:
            versions = versions[:1]
        else:
            versions = [v for v in versions if v > target]

        if not versions:
            logger.info("✅ No hay migraciones que revertir")
            return []

        done = []
        for version in versions:
            mf = by_version.get(version)
            if mf is None:
                raise MigrationError(
                    f"No se encuentra el archivo de la migración {version} "
                    f"({applied[version].get('migration_name')})",
                    version=version,
                )
            await self._run(mf, DOWN)
            done.append(version)

        logger.info(f"↩️ {len(done)} migraciones revertidas")
        return done

    async def _run(self, mf: MigrationFile, direction: str) -> None:
        """Ejecuta una migración y actualiza la tabla de versiones en una transacción."""
        migration = mf.load()
        operations = migration.plan(direction)

        verb = "Ejecutando" if direction == UP else "Revirtiendo"
        logger.info(f"📦 {verb} migración: {mf.version} {mf.class_name}")

        await self._adapter.begin()
        try:
            start = datetime.now()
            for operation in operations:
                logger.info(f"  -> {operation.describe()}")
                await self._adapter.apply(operation)
            end = datetime.now()

            if direction == UP:
                await self._adapter.record_migration(mf.version, mf.class_name, start, end)
            else:
                await self._adapter.remove_migration(mf.version)
            await self._adapter.commit()
        except Exception as e:
            await self._adapter.rollback()
            logger.error(f"  ❌ Error en {mf.version} {mf.class_name}: {e}")
            raise

        logger.info(f"  ✅ {mf.class_name} completada ({(end - start).total_seconds():.4f}s)")
