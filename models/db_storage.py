import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker

from models.base_model import Base
from models.book import Book
from models.author import Author
from models.category import Category
from models.user import User
from models.refresh_token import RefreshToken
from utils.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Map model names for easy querying
classes = {
    "Book": Book,
    "Author": Author,
    "Category": Category,
    "User": User,
    "RefreshToken": RefreshToken,
}


def _translate_integrity_error(err: IntegrityError):
    """Turn an engine-specific integrity failure into a typed application error."""
    message = str(getattr(err, "orig", err)).lower()
    if "unique" in message or "duplicate key" in message:
        return ConflictError("Unique constraint violated.")
    if "foreign key" in message:
        return ValidationError("Referenced resource does not exist or is still in use.")
    if "not null" in message or "check constraint" in message:
        return ValidationError("Required value missing or out of range.")
    return ValidationError("Integrity error.")


class DBStorage:
    """
    Store handle built by the app factory and passed to whoever needs it.
    Lifecycle: reload() at startup, remove_session() after every request,
    close() at shutdown.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self._engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
        self._session = None
        # Enable SQLite foreign keys (needed for ON DELETE RESTRICT/CASCADE)
        if self._engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self._engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self._engine)
        session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self._session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self._session.add(obj)

    def save(self):
        """Commit session; integrity failures come back as typed errors"""
        try:
            self._session.commit()
        except IntegrityError as err:
            self._session.rollback()
            logger.info("Integrity error on commit: %s", getattr(err, "orig", err))
            raise _translate_integrity_error(err) from err
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self._session.delete(obj)

    def delete_where(self, cls, **filters) -> int:
        """Delete every row matching filters in one statement; returns the row count"""
        return self._session.query(cls).filter_by(**filters).delete(synchronize_session=False)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self._session.get(cls, id)
        return None

    def get_or_raise(self, cls, id):
        obj = self.get(cls, id)
        if obj is None:
            raise NotFoundError(f"{cls.__name__} not found")
        return obj

    def find_by(self, cls, **filters):
        """First object matching equality filters, or None"""
        return self._session.query(cls).filter_by(**filters).first()

    def query(self, cls):
        return self._session.query(cls)

    def count(self, cls):
        """Count rows of one model"""
        return self._session.query(cls).count()

    def remove_session(self):
        """Remove the thread's session (for API teardown)"""
        if self._session is not None:
            self._session.remove()

    def close(self):
        """Release the session and every pooled connection (process shutdown)"""
        self.remove_session()
        self._engine.dispose()
