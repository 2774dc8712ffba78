"""Database setup and the shared store handle."""

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager

from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from sqlalchemy import Engine, create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from donezo.config import Settings, get_settings
from donezo.errors import StorageError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Database:
    """Single shared connection to the embedded store, guarded by one lock.

    Every read and write goes through :meth:`session`, which holds the lock
    for the whole block. A multi-statement operation done inside one block is
    therefore atomic with respect to all other requests.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
        self._lock = threading.Lock()

    @contextmanager
    def session(self) -> Generator[Session]:
        """Lock the store and yield a session, committing on success."""
        with self._lock:
            db = self._session_factory()
            try:
                yield db
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError(str(exc)) from exc
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    def create_tables(self) -> None:
        """Create all tables and upgrade legacy schemas."""
        from donezo import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        _migrate_epoch_timestamps(self.engine)
        _migrate_task_positions(self.engine)

    def dispose(self) -> None:
        """Close the underlying connection."""
        self.engine.dispose()


# Columns that older databases filled with strftime('%s', 'now')
EPOCH_COLUMNS = {
    "sessions": ("created_at", "expires_at"),
    "api_tokens": ("created_at",),
    "todos": ("created_at", "updated_at"),
}

# Matches the text layout SQLAlchemy writes for DateTime on SQLite
EPOCH_TO_TEXT = "strftime('%Y-%m-%d %H:%M:%S.000000', {column}, 'unixepoch')"


def _migrate_epoch_timestamps(engine: Engine) -> None:
    """Rewrite integer Unix timestamps as the datetime text the models read."""
    with engine.begin() as conn:
        for table, columns in EPOCH_COLUMNS.items():
            for column in columns:
                result = conn.execute(
                    text(
                        f"UPDATE {table} SET {column} = {EPOCH_TO_TEXT.format(column=column)} "
                        f"WHERE typeof({column}) = 'integer'"
                    )
                )
                if result.rowcount:
                    logger.info(f"Converted {result.rowcount} epoch values in {table}.{column}")


def _migrate_task_positions(engine: Engine) -> None:
    """Add the position column to todos tables created before ordering existed."""
    columns = {column["name"] for column in inspect(engine).get_columns("todos")}
    if "position" in columns:
        return

    logger.info("Adding position column to todos table")
    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE todos ADD COLUMN position INTEGER DEFAULT 0"))
        # Number existing rows by creation order
        conn.execute(
            text(
                "UPDATE todos SET position = ("
                "SELECT COUNT(*) FROM todos t2 WHERE t2.created_at <= todos.created_at"
                ")"
            )
        )


def init_db(settings: Settings | None = None) -> Database:
    """Create the engine, the tables and the store handle."""
    if settings is None:
        settings = get_settings()

    # One connection for the whole process; the handle's lock serializes access
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=settings.db_echo,
    )

    # Instrument SQLAlchemy with OpenTelemetry
    if settings.otel_enabled:
        SQLAlchemyInstrumentor().instrument(
            engine=engine,
            service=settings.otel_service_name,
        )

    db = Database(engine)
    db.create_tables()
    return db
