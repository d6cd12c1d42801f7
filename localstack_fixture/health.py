"""
Functional health check against a running emulator.

Readiness is decided from the container logs. This module answers a
different question: does the emulator actually serve requests at a
given endpoint?
"""

import logging

import requests

logger = logging.getLogger(__name__)

HEALTH_PATH = "/_localstack/health"


def get_health(endpoint_url: str, timeout: float = 5.0) -> dict:
    """
    Fetch the emulator's health document.

    Args:
        endpoint_url: Base URL, e.g. "http://127.0.0.1:49153"
        timeout: Request timeout in seconds

    Returns:
        dict: Parsed health document, including a "services" mapping

    Raises:
        requests.exceptions.RequestException: On connection or HTTP errors
        ValueError: If the body is not a health document
    """
    response = requests.get(f"{endpoint_url.rstrip('/')}{HEALTH_PATH}", timeout=timeout)
    response.raise_for_status()
    body = response.json()
    if not isinstance(body, dict) or not isinstance(body.get("services"), dict):
        raise ValueError(f"Unexpected health response: {body!r}")
    return body


def is_functional(endpoint_url: str, timeout: float = 5.0) -> bool:
    """Return True if the emulator at endpoint_url answers its health check."""
    if not endpoint_url:
        return False
    try:
        get_health(endpoint_url, timeout=timeout)
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.debug(f"Health check against {endpoint_url} failed: {e}")
        return False
    return True
