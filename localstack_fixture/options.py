"""
Options that configure a Stack before it starts.

Each option is a plain callable taking the Stack and mutating its
configuration. Options never talk to docker.

Usage:
    option = with_init_script_mount("./init", "Bootstrap complete")
    await stack.start(option, with_init_timeout(60))
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .stack import Stack

StackOption = Callable[["Stack"], None]

INIT_SCRIPT_TARGET = "/etc/localstack/init/ready.d/"
DEFAULT_CONTAINER_NAME = "localstack"


def with_init_script_mount(init_script_dir: str | Path, ready_log_line: str) -> StackOption:
    """
    Mount a directory of init scripts and wait for a line they log.

    The directory is mounted into the emulator's ready.d hook directory,
    so its scripts run once the emulator is up. Start then waits for
    ready_log_line instead of the default marker.

    Args:
        init_script_dir: Local directory holding the scripts
        ready_log_line: Line the scripts print when they are done

    Raises:
        ConfigurationError: If the line is empty or the directory doesn't exist
    """
    if not ready_log_line:
        raise ConfigurationError(
            "init script mount requires a line to wait for in the init script for completion"
        )

    source = Path(init_script_dir).expanduser().resolve()
    if not source.is_dir():
        raise ConfigurationError(f"Init script directory not found: {init_script_dir}")

    target = INIT_SCRIPT_TARGET + source.name

    def option(stack: "Stack") -> None:
        stack.volume_mounts[target] = str(source)
        stack.ready_log_line = ready_log_line

    return option


def with_cancel_event(event: asyncio.Event) -> StackOption:
    """Tear the stack down when event is set."""

    def option(stack: "Stack") -> None:
        stack.cancel_event = event

    return option


def with_init_timeout(timeout: float) -> StackOption:
    """Fail start if the emulator isn't ready after timeout seconds (0 = no limit)."""
    if timeout < 0:
        raise ConfigurationError(f"Init timeout must not be negative: {timeout}")

    def option(stack: "Stack") -> None:
        stack.init_timeout = timeout

    return option


def with_reuse_existing(name: str = DEFAULT_CONTAINER_NAME) -> StackOption:
    """
    Name the container and join it if it is already running.

    Lets several stacks (or test processes) share one emulator instead of
    failing on the name conflict.
    """

    def option(stack: "Stack") -> None:
        stack.reuse_existing = True
        stack.container_name = name

    return option


def with_container_name(name: str) -> StackOption:
    def option(stack: "Stack") -> None:
        stack.container_name = name

    return option


def with_no_init_wait() -> StackOption:
    """Return from start as soon as the container runs, without waiting for readiness."""

    def option(stack: "Stack") -> None:
        stack.wait_for_init = False

    return option
