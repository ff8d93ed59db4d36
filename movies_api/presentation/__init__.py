"""Presentation layer: rutas HTTP."""
