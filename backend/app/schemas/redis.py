"""Pydantic schemas for the Redis database General settings."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Human-readable names used in validation messages
FIELD_LABELS: dict[str, str] = {
    "name": "Name",
    "description": "Description",
    "redis_conf": "Redis Configuration",
    "redis_username": "Redis Username",
    "redis_password": "Redis Password",
    "image": "Image",
    "ports_mappings": "Port Mapping",
    "is_public": "Is Public",
    "public_port": "Public Port",
    "custom_docker_run_options": "Custom Docker Options",
}

# Rules enforced by RedisGeneralForm, keyed by field name
FIELD_RULES: dict[str, str] = {
    "name": "required",
    "description": "nullable",
    "redis_conf": "nullable",
    "redis_username": "required",
    "redis_password": "required",
    "image": "required",
    "ports_mappings": "nullable",
    "is_public": "nullable|boolean",
    "public_port": "nullable|integer",
    "is_log_drain_enabled": "nullable|boolean",
    "custom_docker_run_options": "nullable",
}

_REQUIRED_FIELDS = tuple(field for field, rule in FIELD_RULES.items() if "required" in rule)


class RedisGeneralForm(BaseModel):
    """Editable fields of a Redis database, validated before every save."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str | None = None
    redis_conf: str | None = None
    redis_username: str
    redis_password: str
    image: str
    ports_mappings: str | None = None
    is_public: bool | None = None
    public_port: int | None = None
    is_log_drain_enabled: bool | None = None
    custom_docker_run_options: str | None = None

    @field_validator(*_REQUIRED_FIELDS, mode="before")
    @classmethod
    def reject_blank(cls, v):
        # A whitespace-only value counts as missing
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("required")
        return v


def field_label(field: str) -> str:
    return FIELD_LABELS.get(field, field.replace("_", " "))


def format_validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Turn a pydantic ValidationError into per-field, labelled messages."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        label = field_label(field)
        error_type = error["type"]
        rule = FIELD_RULES.get(field, "")

        if error_type == "missing" or "required" in str(error.get("msg", "")):
            message = f"The {label} field is required."
        elif "integer" in rule:
            message = f"The {label} field must be an integer."
        elif "boolean" in rule:
            message = f"The {label} field must be true or false."
        else:
            message = f"The {label} field is invalid."
        errors.setdefault(field, []).append(message)
    return errors


class RedisGeneralUpdate(BaseModel):
    """Schema for submitting the General settings form.

    Only fields present in the request are applied. The public flag and the
    log drain flag are toggled through their own endpoints.
    """

    name: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=2000)
    redis_conf: str | None = None
    redis_username: str | None = Field(None, max_length=255)
    redis_password: str | None = None
    image: str | None = Field(None, max_length=255)
    ports_mappings: str | None = None
    public_port: int | None = Field(None, ge=1, le=65535)
    custom_docker_run_options: str | None = None


class RedisExposureUpdate(BaseModel):
    """Schema for toggling public exposure."""

    is_public: bool
    public_port: int | None = Field(None, ge=1, le=65535)


class RedisLogDrainUpdate(BaseModel):
    """Schema for toggling log draining."""

    is_log_drain_enabled: bool


class NotificationResponse(BaseModel):
    level: str
    message: str


class RedisDatabaseResponse(BaseModel):
    """Settings of a Redis database (password never included)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    uuid: str
    name: str | None
    description: str | None
    redis_conf: str | None
    redis_username: str | None
    image: str | None
    ports_mappings: str | None
    custom_docker_run_options: str | None
    status: str
    is_public: bool
    public_port: int | None
    is_log_drain_enabled: bool
    server_id: UUID


class RedisSettingsResponse(BaseModel):
    """General settings view: record, connection URLs and notifications."""

    database: RedisDatabaseResponse
    db_url: str | None
    db_url_public: str | None
    notifications: list[NotificationResponse] = []


class EnvironmentVariableResponse(BaseModel):
    """Runtime environment variable (value never included)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    key: str
    is_shared: bool
    has_value: bool


class EnvironmentVariableListResponse(BaseModel):
    items: list[EnvironmentVariableResponse]
    total: int
