"""
Persistence layer: SQLAlchemy models and the DBStorage handle.

There is no module-level storage instance; the app factory builds one
from configuration and passes it around.
"""
from models.db_storage import DBStorage, classes

__all__ = ["DBStorage", "classes"]
