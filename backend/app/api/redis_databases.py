"""Redis database General settings endpoints.

Each request binds one database record to a ``RedisGeneralSettings``
controller. Mutating endpoints apply the requested field changes to the
record, run the matching controller operation and return the resulting state
together with the notifications it produced. Operation failures are reported
as error notifications, not HTTP errors.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import get_db
from app.schemas.redis import (
    EnvironmentVariableListResponse,
    EnvironmentVariableResponse,
    NotificationResponse,
    RedisDatabaseResponse,
    RedisExposureUpdate,
    RedisGeneralUpdate,
    RedisLogDrainUpdate,
    RedisSettingsResponse,
)
from app.services.database_proxy import DatabaseProxyService, get_database_proxy_service
from app.services.environment_variable import EnvironmentVariableService
from app.services.redis_database import RedisDatabaseService
from app.services.redis_settings import RedisGeneralSettings

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/databases/redis",
    tags=["redis"],
)


async def get_redis_settings(
    database_uuid: str,
    db: AsyncSession = Depends(get_db),
    proxy: DatabaseProxyService = Depends(get_database_proxy_service),
) -> AsyncGenerator[RedisGeneralSettings, None]:
    """Dependency binding the requested database to a mounted settings controller."""
    databases = RedisDatabaseService(db)
    database = await databases.get_by_uuid(database_uuid)
    if not database:
        logger.info(f"Redis database {database_uuid} not found")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Database {database_uuid} not found",
        )

    controller = RedisGeneralSettings(
        database=database,
        databases=databases,
        environment_variables=EnvironmentVariableService(db),
        proxy=proxy,
    )
    controller.mount()
    try:
        yield controller
    finally:
        await controller.close()


def _to_response(controller: RedisGeneralSettings) -> RedisSettingsResponse:
    return RedisSettingsResponse(
        database=RedisDatabaseResponse.model_validate(controller.database),
        db_url=controller.db_url,
        db_url_public=controller.db_url_public,
        notifications=[
            NotificationResponse(level=n.level.value, message=n.message)
            for n in controller.notifier.notifications
        ],
    )


@router.get("/{database_uuid}", response_model=RedisSettingsResponse)
async def get_settings(
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> RedisSettingsResponse:
    """Get the General settings of a Redis database."""
    return _to_response(controller)


@router.patch("/{database_uuid}", response_model=RedisSettingsResponse)
async def submit_settings(
    data: RedisGeneralUpdate,
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> RedisSettingsResponse:
    """Validate and save the General settings form.

    Changed credentials are propagated to the container's runtime
    environment variables.
    """
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(controller.database, field, value)

    await controller.submit()
    return _to_response(controller)


@router.post("/{database_uuid}/public", response_model=RedisSettingsResponse)
async def toggle_public(
    data: RedisExposureUpdate,
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> RedisSettingsResponse:
    """Make the database publicly accessible, or private again."""
    if "public_port" in data.model_fields_set:
        controller.database.public_port = data.public_port
    controller.database.is_public = data.is_public

    await controller.instant_save()
    return _to_response(controller)


@router.post("/{database_uuid}/log-drain", response_model=RedisSettingsResponse)
async def toggle_log_drain(
    data: RedisLogDrainUpdate,
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> RedisSettingsResponse:
    """Enable or disable log draining for the database."""
    controller.database.is_log_drain_enabled = data.is_log_drain_enabled

    await controller.instant_save_advanced()
    return _to_response(controller)


@router.post("/{database_uuid}/refresh", response_model=RedisSettingsResponse)
async def refresh_settings(
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> RedisSettingsResponse:
    """Reload the database after it changed elsewhere (e.g. a status update)."""
    await controller.refresh()
    return _to_response(controller)


@router.get(
    "/{database_uuid}/environment-variables",
    response_model=EnvironmentVariableListResponse,
)
async def list_environment_variables(
    controller: RedisGeneralSettings = Depends(get_redis_settings),
) -> EnvironmentVariableListResponse:
    """List runtime environment variables (values never exposed)."""
    variables = await controller.environment_variables.list_by_database(controller.database.id)
    return EnvironmentVariableListResponse(
        items=[EnvironmentVariableResponse.model_validate(v) for v in variables],
        total=len(variables),
    )
