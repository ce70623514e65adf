"""Server model - a host machine that runs database containers."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.standalone_redis import StandaloneRedis


class Server(BaseModel):
    """Deployment server.

    Besides its address, a server records which log drain providers have been
    configured on it. Databases may only enable log draining when at least
    one provider is active on their host.
    """

    __tablename__ = "servers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Address used for public connection URLs
    ip: Mapped[str] = mapped_column(String(255), nullable=False)

    # Log drain providers
    is_logdrain_newrelic_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    is_logdrain_highlight_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    is_logdrain_axiom_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_logdrain_custom_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    redis_databases: Mapped[list["StandaloneRedis"]] = relationship(
        "StandaloneRedis",
        back_populates="server",
        cascade="all, delete-orphan",
    )

    def is_log_drain_enabled(self) -> bool:
        """Whether any log drain provider is enabled on this server."""
        return bool(
            self.is_logdrain_newrelic_enabled
            or self.is_logdrain_highlight_enabled
            or self.is_logdrain_axiom_enabled
            or self.is_logdrain_custom_enabled
        )

    def __repr__(self) -> str:
        return f"<Server {self.name} ({self.ip})>"
