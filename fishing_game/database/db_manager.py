import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure

from ..config import settings
from .repositories.base_repository import StatsRepository
from .repositories.json_stats_repository import JsonStatsRepository
from .repositories.stats_repository import MongoStatsRepository

log = logging.getLogger(__name__)

# Module-level client, created on first use
db_client: MongoClient | None = None
db: Database | None = None

def connect_to_db():
    """Establishes connection to the MongoDB database."""
    global db_client, db
    if db_client is None:
        log.info(f"Connecting to MongoDB at {settings.MONGO_HOST}:{settings.MONGO_PORT}...")
        try:
            db_client = MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=5000)
            # The ping command is cheap and does not require auth.
            db_client.admin.command('ping')
            db = db_client[settings.MONGO_DB_NAME]
            log.info(f"Successfully connected to MongoDB database: {settings.MONGO_DB_NAME}")
        except ConnectionFailure as e:
            log.error(f"Could not connect to MongoDB: {e}")
            db_client = None
            db = None
            raise ConnectionFailure("Failed to connect to MongoDB") from e

def get_db() -> Database:
    """Returns the database instance, connecting if necessary."""
    if db is None:
        connect_to_db()
    return db

def close_db_connection():
    """Closes the MongoDB connection."""
    global db_client, db
    if db_client:
        log.info("Closing MongoDB connection.")
        db_client.close()
        db_client = None
        db = None

def create_stats_repository() -> StatsRepository:
    """
    Builds the stats repository selected by settings.STATS_BACKEND.

    Falls back to the JSON file store when MongoDB is selected but
    unreachable, so a missing database never stops play.
    """
    if settings.STATS_BACKEND == "mongo":
        try:
            return MongoStatsRepository(get_db())
        except ConnectionFailure as e:
            log.error(f"MongoDB stats backend unavailable, using JSON file store: {e}")
    elif settings.STATS_BACKEND != "json":
        log.warning(f"Unknown STATS_BACKEND '{settings.STATS_BACKEND}', using JSON file store.")
    return JsonStatsRepository(settings.SAVE_DIR, settings.SAVE_FILE)
