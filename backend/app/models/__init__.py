# Redisbox Models
from app.models.base import BaseModel
from app.models.environment_variable import EnvironmentVariable
from app.models.server import Server
from app.models.standalone_redis import StandaloneRedis

__all__ = [
    "BaseModel",
    "EnvironmentVariable",
    "Server",
    "StandaloneRedis",
]
