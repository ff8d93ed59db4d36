"""
Movies API – Configuración de migraciones
==========================================
Lee `migrations.yml`:

    paths:
      migrations: "%%CONFIG_DIR%%/movies_api/db/migrations"
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

Las referencias ${VAR} se resuelven contra os.environ, que la CLI
rellena antes con load_env() (mismo .env que la API).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from movies_api.domain.exceptions import ConfigurationError, UnknownEnvironmentError
from movies_api.shared.config.env import env

DEFAULT_CONFIG_FILE = "migrations.yml"
DEFAULT_LOG_TABLE = "phinxlog"
CONFIG_DIR_TOKEN = "%%CONFIG_DIR%%"

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

# Claves de entorno que no son datos de conexión
_RESERVED_KEYS = {"default_migration_table", "default_environment"}


def expand_env(value: Any) -> Any:
    """Sustituye ${VAR} por su valor; una variable ausente queda vacía."""
    if not isinstance(value, str):
        return value
    return _ENV_REF.sub(lambda m: env(m.group(1)), value)


class MigrationConfig:
    """Vista tipada sobre el YAML de migraciones."""

    def __init__(self, data: Dict[str, Any], path: Union[str, Path]):
        self._data = data or {}
        self.path = Path(path).resolve()

    @classmethod
    def from_file(cls, path: Union[str, Path] = DEFAULT_CONFIG_FILE) -> "MigrationConfig":
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(
                f"No existe el archivo de configuración {path} (ejecuta 'init' primero)",
                source=str(path),
            )
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML inválido en {path}: {e}", source=str(path)) from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} debe contener un mapa YAML", source=str(path))
        return cls(data, path)

    @property
    def config_dir(self) -> Path:
        return self.path.parent

    @property
    def migrations_path(self) -> Path:
        raw = (self._data.get("paths") or {}).get("migrations", "db/migrations")
        raw = expand_env(str(raw)).replace(CONFIG_DIR_TOKEN, str(self.config_dir))
        path = Path(raw)
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    @property
    def _environments(self) -> Dict[str, Any]:
        return self._data.get("environments") or {}

    @property
    def log_table(self) -> str:
        return self._environments.get("default_migration_table") or DEFAULT_LOG_TABLE

    @property
    def default_environment(self) -> Optional[str]:
        return self._environments.get("default_environment")

    def environment_names(self) -> List[str]:
        return [
            name for name, value in self._environments.items()
            if name not in _RESERVED_KEYS and isinstance(value, dict)
        ]

    def environment(self, name: Optional[str] = None) -> Dict[str, Any]:
        """
        Bloque de conexión de un entorno en formato `db`.

        Returns:
            {"adapter", "host", "dbname", "user", "pass", "port", "charset"}
        """
        name = name or self.default_environment
        available = self.environment_names()
        if not name or name not in available:
            raise UnknownEnvironmentError(name or "", available)

        raw = {key: expand_env(value) for key, value in self._environments[name].items()}
        adapter = raw.get("adapter", "mysql")
        if adapter != "mysql":
            raise ConfigurationError(
                f"Adapter no soportado en '{name}': {adapter}", source=str(self.path)
            )
        return {
            "adapter": adapter,
            "host": raw.get("host", ""),
            "dbname": raw.get("name", ""),
            "user": raw.get("user", ""),
            "pass": raw.get("pass", ""),
            "port": _parse_port(raw.get("port"), name),
            "charset": raw.get("charset") or "utf8mb4",
        }


def _parse_port(value: Any, environment: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Puerto inválido en el entorno '{environment}': {value!r}"
        ) from None
