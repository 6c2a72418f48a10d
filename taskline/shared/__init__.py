"""Cross-cutting helpers (logging, datetime)."""
