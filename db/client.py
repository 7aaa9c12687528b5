"""MongoDB connection and database access."""
import os

import certifi
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from config import settings
from utils.logging import get_logger

logger = get_logger(__name__)

_client: MongoClient | None = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        kwargs = {"serverSelectionTimeoutMS": 10000}
        uri = settings.MONGODB_URI or ""
        if "mongodb+srv://" in uri:
            ca_path = certifi.where()
            os.environ.setdefault("SSL_CERT_FILE", ca_path)
            os.environ.setdefault("REQUESTS_CA_BUNDLE", ca_path)
            kwargs["tlsCAFile"] = ca_path
        _client = MongoClient(uri, **kwargs)
        logger.info("MongoDB client connected to %s", uri)
    return _client


def get_db() -> Database:
    return get_client()[settings.MONGODB_DB]


def ensure_indexes() -> None:
    """Create indexes for all collections. Run once at startup."""
    db = get_db()

    db.users.create_index("handle", unique=True)
    db.problems.create_index("assigned_to", unique=True)
    db.leaderboard.create_index("handle")
    db.leaderboard.create_index("date")
    db.leaderboard.create_index([("handle", ASCENDING), ("date", DESCENDING)])
    db.quests.create_index([("user_handle", ASCENDING), ("created_at", DESCENDING)])

    logger.info("MongoDB indexes ensured")
