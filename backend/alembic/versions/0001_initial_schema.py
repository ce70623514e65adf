"""Initial schema with servers, redis databases and environment variables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:12:40

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "servers",
        sa.Column("id", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ip", sa.String(length=255), nullable=False),
        sa.Column(
            "is_logdrain_newrelic_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "is_logdrain_highlight_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("is_logdrain_axiom_enabled", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "is_logdrain_custom_enabled", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "standalone_redis",
        sa.Column("id", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("uuid", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("redis_conf", sa.Text(), nullable=True),
        sa.Column("redis_username", sa.String(length=255), nullable=False),
        # AES-256-GCM ciphertext
        sa.Column("redis_password", sa.LargeBinary(), nullable=False),
        sa.Column("image", sa.String(length=255), nullable=False),
        sa.Column("ports_mappings", sa.Text(), nullable=True),
        sa.Column("custom_docker_run_options", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=64), nullable=False, server_default="exited"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("public_port", sa.Integer(), nullable=True),
        sa.Column("is_log_drain_enabled", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("server_id", sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(["server_id"], ["servers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
    )

    op.create_table(
        "environment_variables",
        sa.Column("id", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.Column("standalone_redis_id", sa.UUID(), nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("encrypted_value", sa.LargeBinary(), nullable=True),
        sa.Column("is_shared", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(
            ["standalone_redis_id"], ["standalone_redis.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "standalone_redis_id", "key", name="uq_environment_variables_redis_key"
        ),
    )


def downgrade() -> None:
    op.drop_table("environment_variables")
    op.drop_table("standalone_redis")
    op.drop_table("servers")
