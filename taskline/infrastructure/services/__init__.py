"""Infrastructure services: rule automation, audit recording, work sessions."""
