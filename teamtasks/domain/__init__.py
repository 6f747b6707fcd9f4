"""Domain layer: models, errors, and pure domain services."""
