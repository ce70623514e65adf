# Redisbox Pydantic Schemas
from app.schemas.redis import (
    FIELD_LABELS,
    FIELD_RULES,
    EnvironmentVariableListResponse,
    EnvironmentVariableResponse,
    NotificationResponse,
    RedisDatabaseResponse,
    RedisExposureUpdate,
    RedisGeneralForm,
    RedisGeneralUpdate,
    RedisLogDrainUpdate,
    RedisSettingsResponse,
)

__all__ = [
    "FIELD_LABELS",
    "FIELD_RULES",
    "EnvironmentVariableListResponse",
    "EnvironmentVariableResponse",
    "NotificationResponse",
    "RedisDatabaseResponse",
    "RedisExposureUpdate",
    "RedisGeneralForm",
    "RedisGeneralUpdate",
    "RedisLogDrainUpdate",
    "RedisSettingsResponse",
]
