"""sockpoll - wait for TCP endpoints to open or close."""

from __future__ import annotations

from sockpoll.config import PollConfig, Target
from sockpoll.errors import ConfigurationError, SockPollError, UnexpectedSocketError
from sockpoll.platform import ErrorClassification, Platform, ProbeOutcome
from sockpoll.poller import SocketPoller
from sockpoll.port_utils import find_available_port, free_port, is_port_free

__all__ = [
    # Config
    "Target",
    "PollConfig",
    # Errors
    "SockPollError",
    "ConfigurationError",
    "UnexpectedSocketError",
    # Platform
    "Platform",
    "ProbeOutcome",
    "ErrorClassification",
    # Poller
    "SocketPoller",
    # Ports
    "is_port_free",
    "find_available_port",
    "free_port",
]
