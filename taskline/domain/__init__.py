"""Domain layer: entities, enums, exceptions (no infrastructure imports)."""
