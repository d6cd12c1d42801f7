"""Resolve the host endpoint bound to the emulator's service port."""

import logging

from .docker_runtime import ContainerInfo, PortBinding
from .errors import PortResolutionError

logger = logging.getLogger(__name__)

SERVICE_PORT = "4566/tcp"
LOOPBACK = "127.0.0.1"

# Addresses docker reports for "all interfaces", which a client can't connect to
WILDCARD_ADDRESSES = {"", "0.0.0.0", "::", "[::]"}


def normalize_host(host_ip: str) -> str:
    """Rewrite a wildcard bind address to the loopback address."""
    if host_ip in WILDCARD_ADDRESSES:
        return LOOPBACK
    return host_ip


def resolve_binding(info: ContainerInfo, port: str = SERVICE_PORT) -> PortBinding:
    """
    Find the host binding for a container port.

    IPv4 bindings are preferred when docker reports both families.

    Args:
        info: Inspected container
        port: Container port, e.g. "4566/tcp"

    Returns:
        A PortBinding with a connectable host address

    Raises:
        PortResolutionError: If the port has no host binding
    """
    bindings = [b for b in info.ports.get(port, []) if b.host_port]
    if not bindings:
        raise PortResolutionError(
            f"Container {info.container_id} has no host binding for {port}"
        )

    ipv4 = [b for b in bindings if ":" not in b.host_ip]
    chosen = (ipv4 or bindings)[0]
    resolved = PortBinding(host_ip=normalize_host(chosen.host_ip), host_port=chosen.host_port)
    logger.debug(f"Resolved {port} -> {resolved.host_ip}:{resolved.host_port}")
    return resolved


def endpoint_url(binding: PortBinding) -> str:
    host = binding.host_ip
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{binding.host_port}"
