"""
Movies API – Schemas (Pydantic)
================================
Cuerpos de request/response de la API de películas.

Las columnas de `movies` son TEXT nullable: una fila leída puede traer
`name` NULL o vacío, así que solo el body de entrada exige nombre.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class MovieIn(BaseModel):
    """Body para crear una película."""
    name: str = Field(..., min_length=1)
    year: Optional[str] = None
    director: Optional[str] = None
    summary: Optional[str] = None


class MovieOut(BaseModel):
    """Fila de `movies` tal como está en la base."""
    id: int
    name: Optional[str] = None
    year: Optional[str] = None
    director: Optional[str] = None
    summary: Optional[str] = None


class MovieList(BaseModel):
    count: int
    movies: List[MovieOut]
