"""
Docker runtime adapter for the LocalStack fixture.

This module provides an abstraction over the docker command line for the
handful of operations the fixture needs: checking and pulling images,
creating, starting, inspecting, stopping and removing containers, and
reading their logs.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field

from .errors import (
    ContainerConflictError,
    ContainerCreateError,
    ContainerStartError,
    ContainerStopError,
    ImageAcquisitionError,
    RuntimeConnectionError,
)

logger = logging.getLogger(__name__)

NO_SUCH_CONTAINER = "No such container"
NAME_IN_USE = "is already in use by container"


@dataclass(frozen=True)
class PortBinding:
    """A single host-side binding of a container port."""

    host_ip: str
    host_port: str


@dataclass
class ContainerInfo:
    """
    Information about a Docker container.

    Represents the current state of a container from Docker's perspective.
    """

    container_id: str
    name: str
    status: str
    image: str
    ports: dict[str, list[PortBinding]] = field(default_factory=dict)


class DockerRuntime:
    """
    Thin async wrapper around the docker CLI.

    Every call spawns a docker subprocess, so DOCKER_HOST and the other
    standard docker environment variables are honored as usual.
    """

    def __init__(self, docker_binary: str = "docker"):
        """
        Initialize the runtime adapter.

        Args:
            docker_binary: Name or path of the docker executable
        """
        self.docker_binary = docker_binary

    async def _run(self, *args: str) -> tuple[int, str, str]:
        """
        Run a docker command to completion.

        Returns:
            Tuple of (returncode, stdout, stderr)
        """
        logger.debug(f"Running: {self.docker_binary} {' '.join(args)}")
        process = await asyncio.create_subprocess_exec(
            self.docker_binary,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        return process.returncode, stdout.decode(), stderr.decode()

    async def ping(self) -> str:
        """
        Check that the docker daemon is reachable.

        Returns:
            The server version reported by the daemon

        Raises:
            RuntimeConnectionError: If the binary is missing or the daemon is down
        """
        try:
            returncode, stdout, stderr = await self._run(
                "version", "--format", "{{.Server.Version}}"
            )
        except OSError as e:
            raise RuntimeConnectionError(f"Cannot run {self.docker_binary}: {e}") from e

        if returncode != 0:
            raise RuntimeConnectionError(
                f"Cannot connect to the docker daemon: {stderr.strip()}"
            )
        return stdout.strip()

    async def image_exists(self, image: str) -> bool:
        """Return True if the image is present locally."""
        returncode, _, _ = await self._run("image", "inspect", image)
        return returncode == 0

    async def pull_image(self, image: str) -> None:
        """
        Pull an image, consuming the whole progress output.

        Raises:
            ImageAcquisitionError: If the pull fails
        """
        logger.info(f"Pulling image {image}")
        returncode, _, stderr = await self._run("pull", image)
        if returncode != 0:
            raise ImageAcquisitionError(f"Failed to pull {image}: {stderr.strip()}")

    async def create_container(
        self,
        image: str,
        name: str | None = None,
        mounts: dict[str, str] | None = None,
        port: str = "4566/tcp",
    ) -> str:
        """
        Create (but don't start) a container.

        The port is published on all interfaces with an ephemeral host port,
        and the container is removed automatically once stopped.

        Args:
            image: Image reference
            name: Optional container name
            mounts: Mapping of container target path -> local source path
            port: Container port to publish, e.g. "4566/tcp"

        Returns:
            The new container ID

        Raises:
            ContainerConflictError: If a container with this name already exists
            ContainerCreateError: If creation fails for any other reason
        """
        args = ["create", "--rm", "--tty", "--publish", f"0.0.0.0::{port}"]
        if name:
            args.extend(["--name", name])
        for target, source in (mounts or {}).items():
            args.extend(["--mount", f"type=bind,source={source},target={target}"])
        args.append(image)

        returncode, stdout, stderr = await self._run(*args)

        if returncode != 0:
            if name and NAME_IN_USE in stderr:
                raise ContainerConflictError(name, stderr.strip())
            raise ContainerCreateError(f"Failed to create container: {stderr.strip()}")

        return stdout.strip()

    async def start_container(self, container_id: str) -> None:
        """
        Start a created container.

        Raises:
            ContainerStartError: If container start fails
        """
        returncode, _, stderr = await self._run("start", container_id)
        if returncode != 0:
            raise ContainerStartError(f"Failed to start container: {stderr.strip()}")

    async def get_logs(self, container_id: str) -> str:
        """
        Return everything the container has logged so far.

        This is a snapshot read, it never follows the stream.
        """
        process = await asyncio.create_subprocess_exec(
            self.docker_binary,
            "logs",
            container_id,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        stdout, _ = await process.communicate()
        if process.returncode != 0:
            raise RuntimeError(f"Failed to read logs: {stdout.decode().strip()}")
        return stdout.decode(errors="replace")

    async def inspect_container(self, container_id: str) -> ContainerInfo | None:
        """
        Get information about a container by ID or name.

        Returns:
            ContainerInfo if container exists, None otherwise
        """
        returncode, stdout, _ = await self._run("inspect", container_id)

        if returncode != 0:
            # Container doesn't exist
            return None

        try:
            data = json.loads(stdout)
            if not data:
                return None
            return _parse_container(data[0])
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            raise RuntimeError(f"Failed to parse container info: {e}") from e

    async def list_containers(self, image: str | None = None) -> list[ContainerInfo]:
        """
        List running containers, optionally only those created from an image.
        """
        args = ["ps", "--format", "{{.ID}}"]
        if image:
            args.extend(["--filter", f"ancestor={image}"])

        returncode, stdout, stderr = await self._run(*args)
        if returncode != 0:
            raise RuntimeError(f"Failed to list containers: {stderr.strip()}")

        containers = []
        for container_id in stdout.split():
            info = await self.inspect_container(container_id)
            if info:
                containers.append(info)
        return containers

    async def stop_container(self, container_id: str, timeout: int = 1) -> None:
        """
        Stop a running container.

        A container that no longer exists counts as stopped, since the
        fixture always creates containers with auto-removal.

        Args:
            container_id: Docker container ID or name
            timeout: Seconds to wait before killing container

        Raises:
            ContainerStopError: If stop operation fails
        """
        returncode, _, stderr = await self._run(
            "stop", "--time", str(timeout), container_id
        )
        if returncode != 0 and NO_SUCH_CONTAINER not in stderr:
            raise ContainerStopError(f"Failed to stop container: {stderr.strip()}")

    async def remove_container(self, container_id: str, force: bool = False) -> None:
        """
        Remove a container.

        Raises:
            RuntimeError: If removal fails
        """
        args = ["rm"]
        if force:
            args.append("--force")
        args.append(container_id)

        returncode, _, stderr = await self._run(*args)

        # Ignore "already removed" errors
        if returncode != 0 and NO_SUCH_CONTAINER not in stderr:
            raise RuntimeError(f"Failed to remove container: {stderr.strip()}")


def _parse_container(container: dict) -> ContainerInfo:
    ports: dict[str, list[PortBinding]] = {}
    raw_ports = (container.get("NetworkSettings") or {}).get("Ports") or {}
    for port, bindings in raw_ports.items():
        ports[port] = [
            PortBinding(host_ip=b.get("HostIp", ""), host_port=b.get("HostPort", ""))
            for b in bindings or []
        ]

    return ContainerInfo(
        container_id=container["Id"],
        name=container.get("Name", "").lstrip("/"),
        status=container["State"]["Status"].lower(),
        image=(container.get("Config") or {}).get("Image", ""),
        ports=ports,
    )
