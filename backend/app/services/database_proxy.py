"""Database proxy service - publishes a database port on its host server.

A private database is only reachable on the internal Docker network. Making it
public starts a small TCP forwarder container named ``<uuid>-proxy`` that
listens on the public port and forwards to the database container.
"""

import asyncio
import logging

from app.core import settings
from app.models.standalone_redis import REDIS_INTERNAL_PORT, StandaloneRedis

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Raised when the proxy container cannot be started or stopped."""


class DatabaseProxyService:
    """Starts and stops public proxies for databases via the Docker CLI."""

    def __init__(
        self,
        docker_binary: str | None = None,
        network: str | None = None,
        image: str | None = None,
        timeout: float | None = None,
    ):
        self.docker_binary = docker_binary or settings.docker_binary
        self.network = network or settings.docker_network
        self.image = image or settings.proxy_image
        self.timeout = timeout or settings.proxy_command_timeout

    async def start(self, database: StandaloneRedis) -> None:
        """Start (or restart) the public proxy for a database.

        Raises:
            ProxyError: If the database has no public port or docker fails
        """
        if not database.public_port:
            raise ProxyError(f"Database {database.uuid} has no public port")

        name = database.proxy_container_name
        port = database.public_port

        # Replace any proxy left over from a previous exposure
        await self._remove_container(name)

        await self._docker(
            "run",
            "--detach",
            "--name",
            name,
            "--restart",
            "unless-stopped",
            "--network",
            self.network,
            "--publish",
            f"{port}:{port}",
            self.image,
            f"TCP-LISTEN:{port},fork,reuseaddr",
            f"TCP:{database.uuid}:{REDIS_INTERNAL_PORT}",
        )
        logger.info(f"Proxy {name} started on public port {port}")

    async def stop(self, database: StandaloneRedis) -> None:
        """Stop the public proxy for a database. Stopping a missing proxy is a no-op."""
        name = database.proxy_container_name
        await self._remove_container(name)
        logger.info(f"Proxy {name} stopped")

    async def _remove_container(self, name: str) -> None:
        try:
            await self._docker("rm", "--force", name)
        except ProxyError as e:
            if "no such container" not in str(e).lower():
                raise

    async def _docker(self, *args: str) -> str:
        """Run a docker command and return its stdout.

        Raises:
            ProxyError: If docker is missing, times out or exits non-zero
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self.docker_binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ProxyError(f"{self.docker_binary} not installed on this host") from None

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except TimeoutError:
            process.kill()
            await process.wait()
            raise ProxyError(
                f"docker {args[0]} timed out after {self.timeout:.0f}s"
            ) from None

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            logger.debug(f"docker {' '.join(args)} exited with {process.returncode}: {message}")
            raise ProxyError(message or f"docker {args[0]} exited with code {process.returncode}")

        return stdout.decode("utf-8", errors="replace").strip()


_proxy_service: DatabaseProxyService | None = None


def get_database_proxy_service() -> DatabaseProxyService:
    """Get the shared proxy service (dependency injection)."""
    global _proxy_service
    if _proxy_service is None:
        _proxy_service = DatabaseProxyService()
    return _proxy_service
