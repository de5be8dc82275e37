import logging
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from wellness import config

logger = logging.getLogger(__name__)

ASSESSMENTS_COLLECTION = "assessment_responses"
DEMOGRAPHICS_COLLECTION = "demographics"
PROGRESS_COLLECTION = "student_progress"

_async_client: Optional[AsyncIOMotorClient] = None


def get_async_client() -> AsyncIOMotorClient:
    """Create the Motor client on first use."""
    global _async_client
    if _async_client is None:
        if not config.MONGODB_URI:
            raise ValueError("MONGODB_URI is missing in .env")
        _async_client = AsyncIOMotorClient(config.MONGODB_URI)
        logger.info("Connected to MongoDB database %s", config.DB_NAME)
    return _async_client


def get_async_db() -> AsyncIOMotorDatabase:
    return get_async_client()[config.DB_NAME]


def async_assessments():
    return get_async_db()[ASSESSMENTS_COLLECTION]


def async_demographics():
    return get_async_db()[DEMOGRAPHICS_COLLECTION]


def async_progress():
    return get_async_db()[PROGRESS_COLLECTION]


def close_client() -> None:
    global _async_client
    if _async_client is not None:
        _async_client.close()
        _async_client = None


# ==================== CREATE INDEXES ====================
async def create_indexes() -> None:
    """Create all necessary database indexes"""
    logger.info("Creating database indexes")

    assessments = async_assessments()
    await assessments.create_index([("user_id", ASCENDING), ("completed_at", DESCENDING)])
    await assessments.create_index([("completed_at", DESCENDING)])

    await async_demographics().create_index([("user_id", ASCENDING)])

    progress = async_progress()
    await progress.create_index([("user_id", ASCENDING)], unique=True)
    await progress.create_index([("last_updated", DESCENDING)])

    logger.info("All indexes created")


# ==================== DATABASE HEALTH CHECK ====================
async def check_database_health() -> Dict[str, Any]:
    """Check database connection and collection counts"""
    try:
        await get_async_client().admin.command("ping")
        database = get_async_db()

        health_report: Dict[str, Any] = {
            "status": "healthy",
            "database": config.DB_NAME,
            "collections": {},
        }
        for name in (ASSESSMENTS_COLLECTION, DEMOGRAPHICS_COLLECTION, PROGRESS_COLLECTION):
            health_report["collections"][name] = {
                "count": await database[name].count_documents({}),
            }
        return health_report

    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return {
            "status": "unhealthy",
            "error": str(e),
        }
