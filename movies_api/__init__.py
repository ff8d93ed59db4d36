"""
Movies API
==========
API de películas sobre MySQL: configuración por .env, contenedor de
dependencias con conexión perezosa y migraciones versionadas.
"""

__version__ = "0.3.0"
