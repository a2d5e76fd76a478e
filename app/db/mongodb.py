"""
MongoDB Connection Utility

MongoDB stores:
- users: students, placement coordinators and admins
- companies: placement offers with compensation and cutoffs

The server is the only writer to both collections.
"""
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
import structlog

from app.core.config import get_settings

settings = get_settings()
logger = structlog.get_logger()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def set_mongo_db(db: Database) -> None:
    """Swap the active database (tests bind an in-memory one here)."""
    global _db
    _db = db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        get_mongo_db().client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("mongodb.ping_failed", error=str(e))
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "companies": "companies",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Login lookups and duplicate registration checks
    db[COLLECTIONS["users"]].create_index("email", unique=True)
    # Student grid is sorted by roll number
    db[COLLECTIONS["users"]].create_index([("roll_no", ASCENDING)])

    db[COLLECTIONS["companies"]].create_index("name")

    logger.info("mongodb.indexes_created")
