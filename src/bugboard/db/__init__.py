"""
bugboard.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The managed Postgres deployment and the local SQLite file share one schema;
# dialect-specific SQL is confined to `repositories.task_counters`.
