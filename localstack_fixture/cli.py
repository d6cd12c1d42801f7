"""
Command line entrypoint for running a LocalStack fixture by hand.

Usage:
    localstack-fixture up [OPTIONS]
    localstack-fixture health URL
    python -m localstack_fixture up [OPTIONS]
"""

import asyncio
import logging
import signal
import sys
from typing import Any

import click

from .config import LOG_LEVELS, get_container_name, get_image, get_init_timeout, get_log_level
from .errors import ConfigurationError, FixtureError
from .health import is_functional
from .options import (
    StackOption,
    with_cancel_event,
    with_container_name,
    with_init_script_mount,
    with_init_timeout,
    with_no_init_wait,
    with_reuse_existing,
)
from .stack import Stack

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def serve(stack: Stack, options: list[StackOption]) -> None:
    """
    Start the stack and keep it running until SIGINT or SIGTERM.

    The signal sets the stack's cancel event, the stack's watcher tears the
    container down. A signal that arrives while the stack is still starting
    cancels the start, which discards the half-started container.
    """
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def signal_handler(sig: Any, _frame: Any) -> None:
        """Handle shutdown signals."""
        logger.info(f"Received signal {sig}, stopping LocalStack...")
        loop.call_soon_threadsafe(shutdown_event.set)

    previous = {
        sig: signal.signal(sig, signal_handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    start_task = asyncio.create_task(stack.start(*options, with_cancel_event(shutdown_event)))
    shutdown_task = asyncio.create_task(shutdown_event.wait())
    try:
        await asyncio.wait({start_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)

        if not start_task.done():
            logger.info("Interrupted before LocalStack was ready")
            start_task.cancel()
            try:
                await start_task
            except asyncio.CancelledError:
                pass
            return

        start_task.result()
        click.echo(f"Endpoint url: {stack.endpoint_url()}")

        await shutdown_task
    finally:
        for task in (start_task, shutdown_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(start_task, shutdown_task, return_exceptions=True)
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        # Usually a no-op, the watcher got there first
        await stack.stop()


@click.group()
def cli():
    """LocalStack fixture - run a disposable LocalStack container."""
    pass


@cli.command()
@click.option("--image", default=None, help="Emulator image (default: LOCALSTACK_FIXTURE_IMAGE env or localstack/localstack:1.4)")
@click.option(
    "--init-scripts",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory of init scripts to mount into ready.d",
)
@click.option("--ready-line", default=None, help="Log line the init scripts print when done")
@click.option("--init-timeout", type=float, default=None, help="Seconds to wait for readiness, 0 waits forever")
@click.option("--reuse/--no-reuse", default=False, help="Join an already running container with the same name")
@click.option("--name", default=None, help="Container name (default: LOCALSTACK_FIXTURE_CONTAINER_NAME env or localstack when reusing)")
@click.option("--no-wait", is_flag=True, help="Don't wait for the readiness marker")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: LOCALSTACK_FIXTURE_LOG_LEVEL env or INFO)",
)
def up(
    image: str | None,
    init_scripts: str | None,
    ready_line: str | None,
    init_timeout: float | None,
    reuse: bool,
    name: str | None,
    no_wait: bool,
    log_level: str | None,
):
    """Start LocalStack and keep it running until interrupted."""
    configure_logging(log_level or get_log_level())

    try:
        options = build_options(init_scripts, ready_line, init_timeout, reuse, name, no_wait)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    stack = Stack(image=image or get_image())
    try:
        asyncio.run(serve(stack, options))
    except FixtureError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def build_options(
    init_scripts: str | None,
    ready_line: str | None,
    init_timeout: float | None,
    reuse: bool,
    name: str | None,
    no_wait: bool,
) -> list[StackOption]:
    """
    Turn command line flags into stack options.

    Raises:
        ConfigurationError: If the flags are inconsistent
    """
    options = []

    if init_scripts:
        options.append(with_init_script_mount(init_scripts, ready_line or ""))
    elif ready_line:
        raise ConfigurationError("--ready-line requires --init-scripts")

    options.append(with_init_timeout(init_timeout if init_timeout is not None else get_init_timeout()))

    if reuse:
        options.append(with_reuse_existing(name or get_container_name()))
    elif name:
        options.append(with_container_name(name))

    if no_wait:
        options.append(with_no_init_wait())

    return options


@cli.command()
@click.argument("url")
@click.option("--timeout", type=float, default=5.0, help="Request timeout in seconds")
def health(url: str, timeout: float):
    """Check whether the emulator at URL answers requests."""
    if is_functional(url, timeout=timeout):
        click.echo("healthy")
    else:
        click.echo("unhealthy")
        sys.exit(1)


def main() -> None:
    cli()
