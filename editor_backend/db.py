import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient

from .config import MONGODB_DB, MONGODB_URI

client = AsyncIOMotorClient(MONGODB_URI)
db = client[MONGODB_DB]
logger = logging.getLogger(__name__)


async def ensure_indexes() -> None:
    try:
        await asyncio.wait_for(db.word_suggestions.create_index("word"), timeout=8)
        await asyncio.wait_for(
            db.word_suggestions.create_index([("approvals", -1), ("_id", 1)]), timeout=8
        )
        await asyncio.wait_for(db.word_suggestions.create_index("merged"), timeout=8)
        await asyncio.wait_for(db.word_suggestions.create_index("examples._id"), timeout=8)
        await asyncio.wait_for(db.example_suggestions.create_index("igbo"), timeout=8)
        await asyncio.wait_for(
            db.example_suggestions.create_index([("approvals", -1), ("_id", 1)]), timeout=8
        )
    except Exception as exc:  # pragma: no cover
        logger.warning("Index creation skipped/deferred during startup: %s", exc)
