"""StandaloneRedis model - a managed Redis database instance."""

import secrets
import string
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.versions import image_version, version_at_least
from app.models.base import BaseModel
from app.models.types import EncryptedText

if TYPE_CHECKING:
    from app.models.environment_variable import EnvironmentVariable
    from app.models.server import Server

# Port Redis listens on inside its container
REDIS_INTERNAL_PORT = 6379

# First Redis release with ACL users (AUTH <username> <password>)
ACL_MIN_VERSION = "6.0"

_UUID_ALPHABET = string.ascii_lowercase + string.digits


def generate_resource_uuid() -> str:
    """Short lowercase identifier, safe to use as a container hostname."""
    return "".join(secrets.choice(_UUID_ALPHABET) for _ in range(24))


class StandaloneRedis(BaseModel):
    """Standalone Redis database.

    The container is reachable on the internal Docker network under its
    ``uuid``. When ``is_public`` is set, a proxy publishes ``public_port`` on
    the host server.
    """

    __tablename__ = "standalone_redis"

    uuid: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        default=generate_resource_uuid,
    )

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Redis configuration
    redis_conf: Mapped[str | None] = mapped_column(Text, nullable=True)
    redis_username: Mapped[str] = mapped_column(String(255), nullable=False, default="default")
    redis_password: Mapped[str] = mapped_column(
        EncryptedText("standalone_redis:redis_password"),
        nullable=False,
    )

    # Container
    image: Mapped[str] = mapped_column(String(255), nullable=False, default="redis:7.2")
    # Comma-separated host:container pairs, e.g. "6380:6379"
    ports_mappings: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_docker_run_options: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lifecycle status, e.g. "running:healthy", "exited"
    status: Mapped[str] = mapped_column(String(64), nullable=False, default="exited")

    # Public exposure
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    public_port: Mapped[int | None] = mapped_column(Integer, nullable=True)

    is_log_drain_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Host server
    server_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        ForeignKey("servers.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    server: Mapped["Server"] = relationship(
        "Server",
        back_populates="redis_databases",
        lazy="selectin",
    )
    runtime_environment_variables: Mapped[list["EnvironmentVariable"]] = relationship(
        "EnvironmentVariable",
        back_populates="database",
        cascade="all, delete-orphan",
    )

    @property
    def redis_version(self) -> str:
        """Version reported by the image tag."""
        return image_version(self.image)

    @property
    def supports_acl(self) -> bool:
        return version_at_least(self.redis_version, ACL_MIN_VERSION)

    def _userinfo(self) -> str:
        if self.supports_acl:
            return f"{self.redis_username}:{self.redis_password}"
        return f":{self.redis_password}"

    @property
    def internal_db_url(self) -> str:
        """Connection URL on the private Docker network."""
        return f"redis://{self._userinfo()}@{self.uuid}:{REDIS_INTERNAL_PORT}/0"

    @property
    def external_db_url(self) -> str | None:
        """Public connection URL, or None when the database is not exposed."""
        if not self.is_public or not self.public_port:
            return None
        return f"redis://{self._userinfo()}@{self.server.ip}:{self.public_port}/0"

    @property
    def proxy_container_name(self) -> str:
        return f"{self.uuid}-proxy"

    def __repr__(self) -> str:
        return f"<StandaloneRedis {self.name} ({self.status})>"
