"""
Movies API – Domain Entity: Movie
==================================
Una fila de la tabla `movies`. Todas las columnas son TEXT en el esquema,
así que `year` se mantiene como string.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class Movie:
    name: Optional[str] = None
    year: Optional[str] = None
    director: Optional[str] = None
    summary: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Movie":
        """Construye la entidad desde una fila de DictCursor."""
        return cls(
            id=row.get("id"),
            name=row.get("name"),
            year=row.get("year"),
            director=row.get("director"),
            summary=row.get("summary"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
