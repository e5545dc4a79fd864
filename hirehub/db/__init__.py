"""
Database module - PostgreSQL and MongoDB connections.
"""
from hirehub.db.postgres import get_db_session, test_postgres_connection
from hirehub.db.mongodb import get_collection, get_mongo_db, test_mongo_connection

__all__ = [
    "get_db_session",
    "test_postgres_connection",
    "get_collection",
    "get_mongo_db",
    "test_mongo_connection"
]
