"""Application layer: DTOs, ports (protocols), use cases."""
