"""
Error types raised by the LocalStack fixture.

Every error derives from FixtureError, which is itself a RuntimeError so
callers that only care about "something went wrong with the container"
can keep catching RuntimeError.
"""


class FixtureError(RuntimeError):
    """Base class for all fixture failures."""


class ConfigurationError(FixtureError, ValueError):
    """An option was given invalid input before start."""


class RuntimeConnectionError(FixtureError):
    """The docker daemon could not be reached."""


class ImageAcquisitionError(FixtureError):
    """The emulator image could not be pulled."""


class ContainerCreateError(FixtureError):
    """The container could not be created."""


class ContainerConflictError(ContainerCreateError):
    """A container with the requested name already exists."""

    def __init__(self, name: str, message: str = ""):
        super().__init__(message or f"Container name {name!r} is already in use")
        self.name = name


class ContainerStartError(FixtureError):
    """The created container failed to start."""


class ReadinessTimeoutError(FixtureError):
    """The readiness marker did not show up in the logs in time."""

    def __init__(self, timeout: float, elapsed: float):
        super().__init__(
            f"Init timeout exceeded ({timeout} seconds, waited {elapsed:.1f})"
        )
        self.timeout = timeout
        self.elapsed = elapsed


class PortResolutionError(FixtureError):
    """No host binding was found for the service port."""


class ContainerStopError(FixtureError):
    """The container could not be stopped."""
