"""MongoDB Client - Connection and Collection Management"""
from typing import Any, Dict, Optional
from pymongo import MongoClient as PyMongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Collection names
FORMS = "forms"
SUBMISSIONS = "submissions"
WORKFLOW_LOGS = "workflow_logs"
DEFAULT_RECORD_TABLE = "form_submissions"

# Database actions may not write into these
RESERVED_COLLECTIONS = frozenset({FORMS, SUBMISSIONS, WORKFLOW_LOGS})

# Global client instance
_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """Get or create MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
        client = PyMongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
        )
        # Test connection
        try:
            client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            client.close()
            raise
        _client = client
    return _client


def get_database() -> Database:
    """Get the application database"""
    global _database
    if _database is None:
        client = get_client()
        _database = client[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str) -> Collection:
    """Get a collection from the database"""
    db = get_database()
    return db[name]


def close_connection() -> None:
    """Close MongoDB connection"""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def create_indexes(db: Optional[Database] = None) -> None:
    """Create all required indexes"""
    db = db if db is not None else get_database()
    logger.info("Creating MongoDB indexes...")

    # Forms collection
    forms = db[FORMS]
    forms.create_index("isTemplate")
    forms.create_index("templateCategory")
    forms.create_index("updatedAt", background=True)

    # Submissions collection
    submissions = db[SUBMISSIONS]
    submissions.create_index([("formId", ASCENDING), ("submittedAt", DESCENDING)])
    submissions.create_index("status")

    # Workflow status log collection
    workflow_logs = db[WORKFLOW_LOGS]
    workflow_logs.create_index([("submissionId", ASCENDING), ("timestamp", ASCENDING)])

    # Default sink for database actions
    records = db[DEFAULT_RECORD_TABLE]
    records.create_index([("formId", ASCENDING), ("submissionId", ASCENDING)], unique=True)

    logger.info("MongoDB indexes created successfully")


def health_check() -> Dict[str, Any]:
    """Check MongoDB health"""
    try:
        client = get_client()
        client.admin.command("ping")
        return {
            "status": "healthy",
            "database": settings.mongo_db,
            "connection": "ok"
        }
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": settings.mongo_db,
            "error": str(e)
        }
