"""Infrastructure layer: MySQL y repositorios concretos."""
