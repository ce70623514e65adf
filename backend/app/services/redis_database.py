"""StandaloneRedis service - persistence for Redis database records."""

import logging

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.standalone_redis import StandaloneRedis

logger = logging.getLogger(__name__)


class RedisDatabaseService:
    """Loads, saves and reloads Redis database records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_uuid(self, uuid: str) -> StandaloneRedis | None:
        """Get a database by its public uuid, with its host server."""
        result = await self.db.execute(
            select(StandaloneRedis)
            .options(selectinload(StandaloneRedis.server))
            .where(StandaloneRedis.uuid == uuid)
        )
        return result.scalar_one_or_none()

    def is_dirty(self, database: StandaloneRedis, field: str) -> bool:
        """Whether ``field`` changed since the record was loaded or last flushed."""
        return inspect(database).attrs[field].history.has_changes()

    async def save(self, database: StandaloneRedis) -> StandaloneRedis:
        """Flush pending changes of the record.

        On failure the transaction is rolled back and the error re-raised.
        """
        try:
            await self.db.flush()
        except Exception:
            await self.rollback(database)
            raise
        await self.db.refresh(database)
        return database

    async def refresh(self, database: StandaloneRedis) -> StandaloneRedis:
        """Reload the record (and its server) from the database."""
        await self.db.refresh(database)
        if database.server is not None:
            await self.db.refresh(database.server)
        return database

    def discard(self, database: StandaloneRedis) -> None:
        """Detach the record so unsaved in-memory changes are never flushed.

        Loaded attributes stay readable on the detached instance.
        """
        server = database.server
        if database in self.db:
            self.db.expunge(database)
        if server is not None and server in self.db:
            self.db.expunge(server)

    async def rollback(self, database: StandaloneRedis) -> None:
        """Discard the record and roll back the session transaction.

        The record is detached first so the rollback does not expire it.
        """
        self.discard(database)
        await self.db.rollback()
        logger.debug(f"Rolled back changes to database {database.uuid}")
