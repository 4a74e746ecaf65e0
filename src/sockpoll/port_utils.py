"""Free-port discovery for launching a process that will later be polled."""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)

__all__ = ["is_port_free", "find_available_port", "free_port"]


def is_port_free(port: int, host: str = "127.0.0.1") -> bool:
    """Check whether a port can be bound right now.

    Args:
        port: The port to check
        host: The interface to bind on (default: 127.0.0.1)

    Returns:
        True if the bind succeeded, False if the port is taken
    """
    # No SO_REUSEADDR: a port in TIME_WAIT should count as taken
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(
    start_port: int,
    host: str = "127.0.0.1",
    max_attempts: int = 100,
) -> int:
    """Find a free port at or above ``start_port``.

    Args:
        start_port: The port to start checking from
        host: The interface to bind on (default: 127.0.0.1)
        max_attempts: Maximum number of ports to try (default: 100)

    Returns:
        An available port number

    Raises:
        OSError: If no available port is found within max_attempts
    """
    end_port = min(start_port + max_attempts, 65536)
    for port in range(start_port, end_port):
        if is_port_free(port, host):
            if port != start_port:
                logger.debug(f"Port {start_port} taken, using {port}")
            return port

    tried = max(end_port - start_port, 0)
    raise OSError(f"No available port found starting from {start_port} (tried {tried} ports)")


def free_port(host: str = "127.0.0.1") -> int:
    """Ask the OS for an ephemeral port that is free at the time of the call."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]
