"""Application DTOs (no dependency on ORM)."""
