"""
MongoDB implementation of SequenceRepository.
"""

import logging

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from wardflow.application.ports.repositories.sequence_repo import SequenceRepository

from ..models.workflow_m import CounterMongo

logger = logging.getLogger(__name__)


class MongoSequenceRepository(SequenceRepository):
    """Counters backed by an atomic ``$inc`` upsert on a unique ``key`` index."""

    async def next_value(self, key: str) -> int:
        try:
            return await self._increment(key)
        except DuplicateKeyError:
            # Lost the race to create the counter; it exists now
            logger.debug(f"🔁 Counter {key} created concurrently, retrying increment")
            return await self._increment(key)

    @staticmethod
    async def _increment(key: str) -> int:
        collection = CounterMongo.get_motor_collection()
        document = await collection.find_one_and_update(
            {"key": key},
            {"$inc": {"value": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(document["value"])
