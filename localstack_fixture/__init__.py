"""
LocalStack fixture module.

This module manages a single LocalStack container for tests that talk to
AWS APIs: it starts the container, waits until the emulator is ready and
exposes the endpoint it was bound to.

Usage:
    async with Stack() as stack:
        client = boto3.client("sqs", endpoint_url=stack.endpoint_url())
"""

from .docker_runtime import ContainerInfo, DockerRuntime, PortBinding
from .errors import (
    ConfigurationError,
    ContainerConflictError,
    ContainerCreateError,
    ContainerStartError,
    ContainerStopError,
    FixtureError,
    ImageAcquisitionError,
    PortResolutionError,
    ReadinessTimeoutError,
    RuntimeConnectionError,
)
from .options import (
    StackOption,
    with_cancel_event,
    with_container_name,
    with_init_script_mount,
    with_init_timeout,
    with_no_init_wait,
    with_reuse_existing,
)
from .stack import LOCALSTACK_IMAGE, Stack

__all__ = [
    "Stack",
    "StackOption",
    "LOCALSTACK_IMAGE",
    "DockerRuntime",
    "ContainerInfo",
    "PortBinding",
    "with_cancel_event",
    "with_container_name",
    "with_init_script_mount",
    "with_init_timeout",
    "with_no_init_wait",
    "with_reuse_existing",
    "FixtureError",
    "ConfigurationError",
    "RuntimeConnectionError",
    "ImageAcquisitionError",
    "ContainerCreateError",
    "ContainerConflictError",
    "ContainerStartError",
    "ReadinessTimeoutError",
    "PortResolutionError",
    "ContainerStopError",
]
