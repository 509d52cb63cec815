"""
Migration script to add the (user_id, title) unique constraint to events.
Default-event resolution depends on it to settle concurrent first accesses.
Run this once against databases created before the constraint existed.
"""
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

CONSTRAINT_NAME = "uq_events_user_title"
CONSTRAINT_COLUMNS = ["user_id", "title"]


def _has_constraint(inspector) -> bool:
    for constraint in inspector.get_unique_constraints("events"):
        if constraint["column_names"] == CONSTRAINT_COLUMNS:
            return True
    for index in inspector.get_indexes("events"):
        if index.get("unique") and index["column_names"] == CONSTRAINT_COLUMNS:
            return True
    return False


def migrate(engine: Engine) -> bool:
    """Add the constraint; returns False when it was already present."""
    with engine.begin() as conn:
        if _has_constraint(inspect(conn)):
            print(f"{CONSTRAINT_NAME} already exists, skipping")
            return False

        duplicates = conn.execute(text("""
            SELECT user_id, title, COUNT(*) AS occurrences
            FROM events
            GROUP BY user_id, title
            HAVING COUNT(*) > 1
        """)).all()
        if duplicates:
            owners = ", ".join(f"user {row.user_id} ({row.occurrences}x '{row.title}')" for row in duplicates)
            raise RuntimeError(
                f"Cannot add {CONSTRAINT_NAME}: duplicate events for {owners}. "
                "Move their gifts onto one event and delete the rest first."
            )

        conn.execute(text(f"CREATE UNIQUE INDEX {CONSTRAINT_NAME} ON events (user_id, title)"))
        print(f"Created {CONSTRAINT_NAME} on events(user_id, title)")
    return True


if __name__ == "__main__":
    from app.core.config import settings
    from app.db.session import build_engine

    migrate(build_engine(settings))
