"""
Movies API – Base de migraciones
=================================
Clase base de la que heredan los archivos de db/migrations/.

Dos estilos:

    class CreateMoviesTable(AbstractMigration):
        def change(self):          # reversible automáticamente
            self.table("movies").add_column("name", "text").create()

    class SeedGenres(AbstractMigration):
        def up(self):
            self.execute("INSERT INTO genres ...")

        def down(self):
            self.execute("DELETE FROM genres ...")

Los métodos solo REGISTRAN operaciones; plan() devuelve la lista que el
manager ejecutará contra la base de datos.
"""

from __future__ import annotations

from typing import Any, List, Optional

from movies_api.db.schema import ExecuteOp, Operation, Table
from movies_api.domain.exceptions import InvalidMigrationError, IrreversibleMigrationError

UP = "up"
DOWN = "down"


class AbstractMigration:

    def __init__(self, version: int, name: Optional[str] = None):
        self.version = version
        self.name = name or type(self).__name__
        self._operations: List[Operation] = []

    # ─── API para las migraciones ──────────────────────────────────────

    def change(self) -> None:
        pass

    def up(self) -> None:
        pass

    def down(self) -> None:
        pass

    def table(self, name: str, **options: Any) -> Table:
        return Table(name, self, **options)

    def execute(self, sql: str) -> None:
        self.record(ExecuteOp(sql))

    def record(self, operation: Operation) -> None:
        self._operations.append(operation)

    # ─── Planificación ─────────────────────────────────────────────────

    def _defines(self, method: str) -> bool:
        return getattr(type(self), method) is not getattr(AbstractMigration, method)

    @property
    def is_reversible(self) -> bool:
        return self._defines("change") or self._defines("down")

    def plan(self, direction: str = UP) -> List[Operation]:
        """
        Ejecuta el cuerpo de la migración en modo registro.

        Returns:
            Operaciones a aplicar, en orden, para `direction`.
        """
        if direction not in (UP, DOWN):
            raise ValueError(f"Dirección inválida: {direction}")

        self._operations = []
        if self._defines("change"):
            self.change()
            if direction == UP:
                return list(self._operations)
            try:
                return [op.inverse() for op in reversed(self._operations)]
            except IrreversibleMigrationError as e:
                e.version = self.version
                raise

        if not self._defines("up"):
            raise InvalidMigrationError(
                f"{self.name} no define change() ni up()"
            )
        if direction == UP:
            self.up()
        else:
            if not self._defines("down"):
                raise IrreversibleMigrationError(
                    f"{self.name} no define down()", version=self.version
                )
            self.down()
        return list(self._operations)

    def __repr__(self) -> str:
        return f"<{self.name} version={self.version}>"
