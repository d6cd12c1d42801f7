"""
Readiness polling for the emulator container.

The emulator has no readiness endpoint we can rely on while it boots, so
readiness is detected by scanning the container's log output for a
marker line.
"""

import asyncio
import logging

from .docker_runtime import DockerRuntime
from .errors import ReadinessTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_READY_LOG_LINE = "INFO success: infra entered RUNNING state"
POLL_INTERVAL = 0.5


async def log_contains(runtime: DockerRuntime, container_id: str, marker: str) -> bool:
    """
    Check a snapshot of the container logs for the marker.

    Log read failures count as "not yet", the container may still be
    coming up.
    """
    try:
        logs = await runtime.get_logs(container_id)
    except (RuntimeError, OSError) as e:
        logger.debug(f"Could not read logs for {container_id}: {e}")
        return False
    return marker in logs


async def wait_until_ready(
    runtime: DockerRuntime,
    container_id: str,
    marker: str = DEFAULT_READY_LOG_LINE,
    timeout: float = 0,
    interval: float = POLL_INTERVAL,
) -> float:
    """
    Poll the container logs until the marker appears.

    Args:
        runtime: Docker runtime to read logs through
        container_id: Container to watch
        marker: Substring that signals readiness
        timeout: Seconds to wait before giving up, 0 waits forever
        interval: Seconds between log reads

    Returns:
        Seconds spent waiting

    Raises:
        ReadinessTimeoutError: If the marker didn't show up within timeout
    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    attempts = 0

    while True:
        attempts += 1
        if await log_contains(runtime, container_id, marker):
            elapsed = loop.time() - start
            logger.info(
                f"Container {container_id} ready after {elapsed:.1f}s ({attempts} checks)"
            )
            return elapsed

        elapsed = loop.time() - start
        if timeout > 0 and elapsed >= timeout:
            raise ReadinessTimeoutError(timeout, elapsed)

        logger.debug(f"Waiting for {marker!r} in {container_id} logs")
        await asyncio.sleep(interval)
