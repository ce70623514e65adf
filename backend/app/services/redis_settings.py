"""General settings controller for a standalone Redis database.

Binds one ``StandaloneRedis`` record for the duration of a request and
implements the settings operations on it:

- ``instant_save``: react to a change of the public flag by starting or
  stopping the public proxy.
- ``submit``: validate and save the form, propagating changed credentials
  into the container's runtime environment variables.
- ``instant_save_advanced``: save the log drain flag if the host supports it.
- ``refresh``: reload the record when it changed elsewhere.

Operations never raise. Outcomes are reported through the ``Notifier``.
"""

import logging

from pydantic import ValidationError

from app.core.versions import image_version, version_at_least
from app.models.server import Server
from app.models.standalone_redis import ACL_MIN_VERSION, StandaloneRedis
from app.schemas.redis import RedisGeneralForm, format_validation_errors
from app.services.database_proxy import DatabaseProxyService
from app.services.environment_variable import EnvironmentVariableService
from app.services.notifier import Notifier
from app.services.redis_database import RedisDatabaseService

logger = logging.getLogger(__name__)

REDIS_USERNAME_VARIABLE = "REDIS_USERNAME"
REDIS_PASSWORD_VARIABLE = "REDIS_PASSWORD"


class FormValidationError(Exception):
    """Raised when the bound record fails the field rules."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        messages = [message for field_errors in errors.values() for message in field_errors]
        super().__init__(messages[0] if messages else "The given data was invalid.")

    @property
    def messages(self) -> list[str]:
        return [message for field_errors in self.errors.values() for message in field_errors]


class RedisGeneralSettings:
    """Settings controller for one Redis database."""

    def __init__(
        self,
        database: StandaloneRedis,
        databases: RedisDatabaseService,
        environment_variables: EnvironmentVariableService,
        proxy: DatabaseProxyService,
        notifier: Notifier | None = None,
    ):
        self.database = database
        self.databases = databases
        self.environment_variables = environment_variables
        self.proxy = proxy
        self.notifier = notifier or Notifier(context=database.uuid)

        self.server: Server | None = None
        self.db_url: str | None = None
        self.db_url_public: str | None = None

    def mount(self) -> None:
        """Populate connection URLs and the host server from the record."""
        self.db_url = self.database.internal_db_url
        self.db_url_public = self.database.external_db_url
        self.server = self.database.server

    async def instant_save_advanced(self) -> None:
        """Save the log drain flag, if the host server supports log draining."""
        try:
            if not self.server.is_log_drain_enabled():
                self.database.is_log_drain_enabled = False
                self.notifier.error(
                    "Log drain is not enabled on the server. Please enable it first."
                )
                return
            await self.databases.save(self.database)
            self.notifier.success("Database updated.")
            self.notifier.success("You need to restart the service for the changes to take effect.")
        except Exception as e:
            await self._handle_error(e)

    async def submit(self) -> None:
        """Validate and save the form.

        Changed credentials are written to the runtime environment variables
        so the container picks them up on its next restart.
        """
        try:
            self.validate()

            redis_version = self.get_redis_version()

            # Read change state before any query: autoflush clears attribute history
            username_changed = self.databases.is_dirty(self.database, "redis_username")
            password_changed = self.databases.is_dirty(self.database, "redis_password")

            if version_at_least(redis_version, ACL_MIN_VERSION) and username_changed:
                await self._update_environment_variable(
                    REDIS_USERNAME_VARIABLE, self.database.redis_username
                )

            if password_changed:
                await self._update_environment_variable(
                    REDIS_PASSWORD_VARIABLE, self.database.redis_password
                )

            await self.databases.save(self.database)
            self.db_url = self.database.internal_db_url

            self.notifier.success("Database updated.")
        except Exception as e:
            await self._handle_error(e)

    def get_redis_version(self) -> str:
        """Version from the image tag, "0.0" when the image has no tag."""
        return image_version(self.database.image)

    def validate(self) -> RedisGeneralForm:
        """Check the bound record against the field rules.

        Raises:
            FormValidationError: With labelled messages per failing field
        """
        try:
            return RedisGeneralForm.model_validate(self.database, from_attributes=True)
        except ValidationError as e:
            raise FormValidationError(format_validation_errors(e)) from e

    async def instant_save(self) -> None:
        """React to a change of the public flag.

        The caller sets ``database.is_public`` to the desired state first.
        Failed preconditions force the flag to False without touching the
        proxy. Operational failures invert the flag back to its pre-toggle
        value.
        """
        try:
            if self.database.is_public and not self.database.public_port:
                self.notifier.error("Public port is required.")
                self.database.is_public = False
                return
            if self.database.is_public:
                if not str(self.database.status).startswith("running"):
                    self.notifier.error("Database must be started to be publicly accessible.")
                    self.database.is_public = False
                    return
                await self.proxy.start(self.database)
                self.notifier.success("Database is now publicly accessible.")
            else:
                await self.proxy.stop(self.database)
                self.notifier.success("Database is no longer publicly accessible.")
            self.db_url_public = self.database.external_db_url
            await self.databases.save(self.database)
        except Exception as e:
            # Not safe under concurrent toggles: inverting assumes nothing
            # else changed the flag during this call.
            self.database.is_public = not self.database.is_public
            await self._handle_error(e)

    async def refresh(self) -> None:
        """Reload the record after it changed elsewhere."""
        try:
            await self.databases.refresh(self.database)
            self.mount()
        except Exception as e:
            await self._handle_error(e)

    async def is_shared_variable(self, name: str) -> bool:
        """Whether ``name`` is a shared (centrally managed) variable of this database."""
        return await self.environment_variables.is_shared(self.database.id, name)

    async def close(self) -> None:
        """End the controller session, dropping unsaved changes of the record."""
        self.databases.discard(self.database)

    async def _update_environment_variable(self, key: str, value: str) -> None:
        variable = await self.environment_variables.find_by_key(self.database.id, key)
        if variable:
            if not variable.is_shared:
                await self.environment_variables.update(variable, value)
        else:
            await self.environment_variables.create(self.database.id, key, value, is_shared=False)

    async def _handle_error(self, error: Exception) -> None:
        """Report a failed operation to the caller without raising."""
        if isinstance(error, FormValidationError):
            logger.warning(f"Validation failed for database {self.database.uuid}: {error.errors}")
            for message in error.messages:
                self.notifier.error(message)
            return

        logger.exception(f"Settings operation failed for database {self.database.uuid}: {error}")
        self.notifier.error(str(error) or error.__class__.__name__)
        try:
            await self.databases.rollback(self.database)
        except Exception:
            logger.exception(f"Rollback failed for database {self.database.uuid}")
