"""
Environment configuration for the localstack-fixture command.

Environment Variables:
    LOCALSTACK_FIXTURE_IMAGE: Emulator image (default: localstack/localstack:1.4)
    LOCALSTACK_FIXTURE_INIT_TIMEOUT: Seconds to wait for readiness, 0 = forever (default: 0)
    LOCALSTACK_FIXTURE_CONTAINER_NAME: Container name used with --reuse (default: localstack)
    LOCALSTACK_FIXTURE_LOG_LEVEL: Logging level (default: INFO)

Command-line arguments override environment variables.
"""

import logging
import os

from .options import DEFAULT_CONTAINER_NAME
from .stack import LOCALSTACK_IMAGE

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_image() -> str:
    return os.environ.get("LOCALSTACK_FIXTURE_IMAGE") or LOCALSTACK_IMAGE


def get_init_timeout() -> float:
    """
    Get the readiness timeout from the environment.

    Returns:
        Seconds to wait for readiness, 0 for no limit
    """
    raw = os.environ.get("LOCALSTACK_FIXTURE_INIT_TIMEOUT", "0")
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Invalid LOCALSTACK_FIXTURE_INIT_TIMEOUT={raw}, using default 0")
        return 0
    if timeout < 0:
        logger.warning(f"Invalid LOCALSTACK_FIXTURE_INIT_TIMEOUT={timeout}, using default 0")
        return 0
    return timeout


def get_container_name() -> str:
    return os.environ.get("LOCALSTACK_FIXTURE_CONTAINER_NAME") or DEFAULT_CONTAINER_NAME


def get_log_level() -> str:
    level = os.environ.get("LOCALSTACK_FIXTURE_LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Invalid LOCALSTACK_FIXTURE_LOG_LEVEL={level}, using default INFO")
        return "INFO"
    return level
