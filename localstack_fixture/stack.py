"""
Lifecycle controller for a LocalStack test fixture container.

A Stack owns at most one emulator container. Start pulls the image if
needed, creates and starts the container, waits until the emulator logs
its readiness marker, then resolves the ephemeral host port so callers
can build clients against endpoint_url().

All state transitions are serialized by a single asyncio lock. The
committed state (container id, port binding, started flag) is swapped in
one synchronous step, so endpoint_url() can be read at any time without
awaiting and never sees a half-started stack.
"""

import asyncio
import logging

from .docker_runtime import DockerRuntime, PortBinding
from .errors import ContainerConflictError, ContainerCreateError, PortResolutionError
from .health import is_functional
from .options import StackOption
from .ports import SERVICE_PORT, endpoint_url, resolve_binding
from .readiness import DEFAULT_READY_LOG_LINE, POLL_INTERVAL, wait_until_ready

logger = logging.getLogger(__name__)

LOCALSTACK_IMAGE = "localstack/localstack:1.4"
STOP_TIMEOUT = 1


class Stack:
    """
    A single LocalStack container used as a test fixture.

    Instances are independent: there is no shared global stack. Pass the
    same instance around to share one emulator between callers.
    """

    def __init__(
        self,
        image: str = LOCALSTACK_IMAGE,
        runtime: DockerRuntime | None = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        """
        Initialize the stack with default settings.

        Args:
            image: Emulator image reference
            runtime: Docker runtime adapter
            poll_interval: Seconds between readiness log checks
        """
        self.image = image
        self.runtime = runtime or DockerRuntime()
        self.poll_interval = poll_interval

        # Configuration, mutated by options before start
        self.container_name: str | None = None
        self.volume_mounts: dict[str, str] = {}  # container target -> local source
        self.ready_log_line = ""
        self.init_timeout: float = 0
        self.reuse_existing = False
        self.wait_for_init = True
        self.cancel_event = asyncio.Event()

        self._lock = asyncio.Lock()
        self._container_id = ""
        self._binding: PortBinding | None = None
        self._started = False
        self._watcher: asyncio.Task | None = None

    @property
    def container_id(self) -> str:
        return self._container_id

    @property
    def started(self) -> bool:
        return self._started

    def endpoint_url(self) -> str:
        """
        Return the emulator URL, e.g. "http://127.0.0.1:49153".

        Returns an empty string unless the stack is running.
        """
        binding = self._binding
        if not self._started or binding is None:
            return ""
        return endpoint_url(binding)

    async def start(self, *options: StackOption, force_restart: bool = False) -> None:
        """
        Start the emulator and wait until it is ready.

        Starting a running stack is a no-op unless force_restart is set, in
        which case the current container is stopped and a new one created.
        Options are only applied when a container is actually started.

        Args:
            *options: Configuration options applied in order
            force_restart: Replace a running container

        Raises:
            FixtureError: If any step fails; no container is left behind
                          by this stack in that case
        """
        async with self._lock:
            if self._started:
                if not force_restart:
                    logger.info(f"Stack already running in container {self._container_id}")
                    return
                logger.info("Forcing restart of running stack")
                await self._stop()

            for option in options:
                option(self)

            await self.runtime.ping()
            await self._start()

    async def stop(self) -> None:
        """
        Stop the container. A no-op if the stack isn't running.

        Raises:
            ContainerStopError: If docker fails to stop the container
        """
        async with self._lock:
            await self._stop()

    async def is_functional(self) -> bool:
        """Return True if the running emulator answers its health check."""
        if not self._started:
            return False
        return await asyncio.to_thread(is_functional, self.endpoint_url())

    async def __aenter__(self) -> "Stack":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _start(self) -> None:
        await self._ensure_image()

        joined = False
        logger.info(f"Creating container from {self.image}")
        try:
            container_id = await self.runtime.create_container(
                self.image,
                name=self.container_name,
                mounts=dict(self.volume_mounts),
                port=SERVICE_PORT,
            )
        except ContainerConflictError:
            if not self.reuse_existing:
                raise
            container_id = await self._join_existing()
            joined = True

        self._container_id = container_id

        try:
            if not joined:
                await self.runtime.start_container(container_id)
                logger.info(f"Started container {container_id}")

            if self.wait_for_init:
                await wait_until_ready(
                    self.runtime,
                    container_id,
                    marker=self.ready_log_line or DEFAULT_READY_LOG_LINE,
                    timeout=self.init_timeout,
                    interval=self.poll_interval,
                )

            binding = await self._resolve_port(container_id)
        except (Exception, asyncio.CancelledError):
            if not joined:
                await self._discard(container_id)
            self._container_id = ""
            raise

        self._binding = binding
        self._started = True
        self._watcher = asyncio.create_task(self._watch_cancel(self.cancel_event))
        logger.info(f"Stack running at {self.endpoint_url()}")

    async def _stop(self) -> None:
        if not self._started or not self._container_id:
            return

        container_id = self._container_id
        logger.info(f"Stopping container {container_id}")
        await self.runtime.stop_container(container_id, timeout=STOP_TIMEOUT)

        self._container_id = ""
        self._binding = None
        self._started = False

        if self._watcher is not None and self._watcher is not asyncio.current_task():
            self._watcher.cancel()
        self._watcher = None
        logger.info(f"Container {container_id} stopped")

    async def _ensure_image(self) -> None:
        if await self.runtime.image_exists(self.image):
            logger.debug(f"Image {self.image} present locally")
            return
        await self.runtime.pull_image(self.image)

    async def _join_existing(self) -> str:
        """Adopt the already existing container named self.container_name."""
        info = await self.runtime.inspect_container(self.container_name)
        if info is None:
            raise ContainerCreateError(
                f"Container {self.container_name!r} conflicted but could not be found"
            )

        logger.warning(f"Reusing existing container {self.container_name} ({info.container_id})")
        if info.status != "running":
            await self.runtime.start_container(info.container_id)
        return info.container_id

    async def _resolve_port(self, container_id: str) -> PortBinding:
        info = await self.runtime.inspect_container(container_id)
        if info is None:
            raise PortResolutionError(f"Container {container_id} disappeared before it was ready")
        return resolve_binding(info, SERVICE_PORT)

    async def _discard(self, container_id: str) -> None:
        """Best-effort removal of a container that failed to come up."""
        try:
            await self.runtime.remove_container(container_id, force=True)
        except (RuntimeError, OSError) as e:
            logger.warning(f"Failed to remove container {container_id}: {e}")

    async def _watch_cancel(self, event: asyncio.Event) -> None:
        """Stop the stack once the cancel event is set."""
        await event.wait()
        logger.info(f"Stopping container: {self._container_id}")
        try:
            await self.stop()
        except Exception:
            logger.error("Failed to stop container after cancellation", exc_info=True)
