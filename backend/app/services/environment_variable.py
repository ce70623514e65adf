"""EnvironmentVariable service - runtime variables for database containers."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.environment_variable import EnvironmentVariable
from app.services.crypto import decrypt, encrypt

logger = logging.getLogger(__name__)


def _aad(database_id: UUID, key: str) -> str:
    # Binds ciphertext to its database and key so values cannot be swapped
    return f"environment_variable:{database_id}:{key}"


class EnvironmentVariableService:
    """Service for managing encrypted runtime environment variables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_key(self, database_id: UUID, key: str) -> EnvironmentVariable | None:
        """Get a variable by exact key, scoped to one database."""
        result = await self.db.execute(
            select(EnvironmentVariable).where(
                EnvironmentVariable.standalone_redis_id == database_id,
                EnvironmentVariable.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        database_id: UUID,
        key: str,
        value: str,
        is_shared: bool = False,
    ) -> EnvironmentVariable:
        """Create a variable with an encrypted value."""
        variable = EnvironmentVariable(
            standalone_redis_id=database_id,
            key=key,
            encrypted_value=encrypt(value, aad=_aad(database_id, key)),
            is_shared=is_shared,
        )
        self.db.add(variable)
        await self.db.flush()
        await self.db.refresh(variable)
        return variable

    async def update(self, variable: EnvironmentVariable, value: str) -> EnvironmentVariable:
        """Overwrite the value of a variable.

        Shared variables are owned elsewhere and are returned unchanged.
        """
        if variable.is_shared:
            logger.info(
                f"Skipping update of shared variable {variable.key} "
                f"for database {variable.standalone_redis_id}"
            )
            return variable

        variable.encrypted_value = encrypt(
            value, aad=_aad(variable.standalone_redis_id, variable.key)
        )
        await self.db.flush()
        await self.db.refresh(variable)
        return variable

    async def is_shared(self, database_id: UUID, key: str) -> bool:
        """Whether a shared variable with this key exists for the database."""
        result = await self.db.execute(
            select(EnvironmentVariable.id).where(
                EnvironmentVariable.standalone_redis_id == database_id,
                EnvironmentVariable.key == key,
                EnvironmentVariable.is_shared.is_(True),
            )
        )
        return result.first() is not None

    async def list_by_database(self, database_id: UUID) -> list[EnvironmentVariable]:
        """List all variables for a database (values never exposed)."""
        result = await self.db.execute(
            select(EnvironmentVariable)
            .where(EnvironmentVariable.standalone_redis_id == database_id)
            .order_by(EnvironmentVariable.key.asc())
        )
        return list(result.scalars().all())

    async def get_decrypted(self, database_id: UUID) -> dict[str, str]:
        """All variables with values as a decrypted dict, for container injection.

        Raises on decryption failure so a container is never started with a
        silently missing variable.
        """
        variables = await self.list_by_database(database_id)
        result = {}
        for variable in variables:
            if variable.encrypted_value is None:
                continue
            try:
                result[variable.key] = decrypt(
                    variable.encrypted_value, aad=_aad(database_id, variable.key)
                )
            except Exception as e:
                raise RuntimeError(
                    f"Failed to decrypt environment variable '{variable.key}' for "
                    f"database {database_id}. This usually means "
                    f"REDISBOX_ENCRYPTION_KEY does not match the key used "
                    f"to encrypt the stored value."
                ) from e
        return result
