"""Domain layer: entidades, puertos de repositorio y excepciones."""
