# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
MongoDB handle with an explicit owner.

The application lifespan owns one ``Database`` for the process; a function
invocation owns one for the duration of the call and closes it in ``finally``.
Nothing is cached at module level.
"""
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from skillmatrix.core.config import Settings, settings
from skillmatrix.core.errors import ConfigurationError
from skillmatrix.core.logging import get_logger
from skillmatrix.models.entities import Entity

logger = get_logger(__name__)

INDEXES: dict[Entity, list[tuple[list[tuple[str, int]], dict[str, Any]]]] = {
    Entity.MEMBERS: [
        ([("email", ASCENDING)], {"unique": True}),
        ([("isActive", ASCENDING)], {}),
    ],
    Entity.SKILLS: [
        ([("name", ASCENDING)], {"unique": True}),
        ([("memberCount", DESCENDING)], {}),
    ],
    Entity.SPECIALTIES: [
        ([("name", ASCENDING)], {"unique": True}),
        ([("memberCount", DESCENDING)], {}),
    ],
    Entity.INTERACTIONS: [
        ([("from", ASCENDING), ("createdAt", DESCENDING)], {}),
        ([("status", ASCENDING)], {}),
    ],
    Entity.ANALYSES: [
        ([("type", ASCENDING), ("createdAt", DESCENDING)], {}),
    ],
}


class Database:
    """Owns a MongoClient and hands out collections by entity."""

    def __init__(self, uri: str, name: str, timeout_ms: int = 30000,
                 client: Optional[MongoClient] = None):
        if not uri and client is None:
            raise ConfigurationError("MONGODB_URI environment variable is missing")
        if not name:
            raise ConfigurationError("MONGODB_DB_NAME environment variable is missing")
        self.name = name
        self.timeout_ms = timeout_ms
        # MongoClient connects lazily; constructing it performs no I/O.
        self._client = client or MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            timeoutMS=timeout_ms,
        )
        self._db = self._client[name]
        self._closed = False

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "Database":
        return cls(config.MONGODB_URI, config.MONGODB_DB_NAME, config.MONGO_TIMEOUT_MS)

    def collection(self, entity: Entity) -> Collection:
        return self._db[entity.value]

    def ping(self) -> None:
        self._client.admin.command("ping")

    def ensure_indexes(self) -> None:
        for entity, specs in INDEXES.items():
            coll = self.collection(entity)
            for keys, options in specs:
                coll.create_index(keys, **options)
        logger.info("Indexes ensured on database %s", self.name)

    def close(self) -> None:
        if not self._closed:
            self._client.close()
            self._closed = True

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
