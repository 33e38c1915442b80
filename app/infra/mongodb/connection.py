"""
MongoDB Connection Management

The application owns a single MongoClient created at startup and hands the
Database to repositories explicitly, so tests can pass an in-memory one.
"""
import logging
from typing import Optional
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
import certifi

from app.config import settings

logger = logging.getLogger(__name__)


def create_client(
    connection_string: str = None,
    use_tls: Optional[bool] = None
) -> MongoClient:
    """
    Create a MongoClient and verify the server is reachable.

    Args:
        connection_string: MongoDB URI (defaults to settings)
        use_tls: Enable TLS with the certifi CA bundle (defaults to settings)

    Returns:
        Connected MongoClient

    Raises:
        ConnectionFailure: If connection fails
    """
    conn_str = connection_string or settings.MONGODB_URI
    tls = settings.MONGODB_TLS if use_tls is None else use_tls

    options = {
        "serverSelectionTimeoutMS": 10000,
        "connectTimeoutMS": 15000,
        "socketTimeoutMS": 15000,
        "retryWrites": True,
        "maxPoolSize": 50,
        "minPoolSize": 10,
    }
    if tls:
        options["tls"] = True
        options["tlsCAFile"] = certifi.where()

    try:
        client = MongoClient(conn_str, **options)

        # Test connection
        client.admin.command('ping')
        logger.info("Connected to MongoDB")
        return client

    except (ConnectionFailure, ServerSelectionTimeoutError) as e:
        logger.error(f"Failed to connect to MongoDB: {str(e)}")
        raise


def get_database(client: MongoClient, db_name: str = None) -> Database:
    """Get the application database from a client."""
    return client[db_name or settings.MONGODB_DB_NAME]


def close_client(client: Optional[MongoClient]):
    """Close the client connection."""
    if client is not None:
        client.close()
        logger.info("Disconnected from MongoDB")


def ensure_indexes(db: Database):
    """Create the indexes the repositories rely on."""
    db["client_preferences"].create_index(
        [("user_id", 1), ("client_name", 1)],
        unique=True,
        name="user_client_unique"
    )
    db["client_preferences"].create_index([("user_id", 1), ("contract_count", -1)])
    db["contracts"].create_index("contract_id", unique=True)
    db["contracts"].create_index([("user_id", 1), ("created_at", -1)])
    db["ai_memory_logs"].create_index([("user_id", 1), ("created_at", -1)])
    db["webhook_integrations"].create_index("user_id", unique=True)
    db["webhook_events"].create_index([("user_id", 1), ("created_at", -1)])
    db["users"].create_index("api_key_hash")
    logger.info("MongoDB indexes ensured")
