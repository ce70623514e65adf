"""EnvironmentVariable model - runtime variables injected into a database container."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import BYTEA
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.standalone_redis import StandaloneRedis


class EnvironmentVariable(BaseModel):
    """Encrypted key-value variable for a database container.

    Values are encrypted with AES-256-GCM at rest and picked up by the
    container on its next restart.

    Shared variables are managed centrally (team or project scope) and must
    never be overwritten from a database's settings.
    """

    __tablename__ = "environment_variables"

    __table_args__ = (
        UniqueConstraint(
            "standalone_redis_id", "key", name="uq_environment_variables_redis_key"
        ),
    )

    standalone_redis_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("standalone_redis.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Variable name (e.g., "REDIS_PASSWORD")
    key: Mapped[str] = mapped_column(String(255), nullable=False)

    encrypted_value: Mapped[bytes | None] = mapped_column(BYTEA, nullable=True)

    is_shared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationship
    database: Mapped["StandaloneRedis"] = relationship(
        "StandaloneRedis", back_populates="runtime_environment_variables"
    )

    @property
    def has_value(self) -> bool:
        return self.encrypted_value is not None

    def __repr__(self) -> str:
        return (
            f"<EnvironmentVariable {self.key} "
            f"(standalone_redis_id={self.standalone_redis_id}, shared={self.is_shared})>"
        )
