"""Shared kernel: configuración y logging."""
