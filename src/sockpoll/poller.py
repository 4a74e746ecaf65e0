"""Bounded-retry TCP connection poller.

Used to wait for a freshly launched driver process to start listening, or to
confirm that one has shut down, before the caller carries on.
"""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Callable
from typing import Any

from sockpoll.config import DEFAULT_INTERVAL, PollConfig, Target, build_config
from sockpoll.errors import UnexpectedSocketError
from sockpoll.platform import ErrorClassification, Platform, ProbeOutcome

logger = logging.getLogger(__name__)

__all__ = ["SocketPoller"]


class SocketPoller:
    """Polls a host:port until it accepts connections or stops accepting them.

    Both predicates block the calling thread for at most ``timeout`` seconds.
    Probes use a non-blocking connect that is re-checked every ``interval``
    seconds rather than waited on with select(), which keeps behaviour the
    same across platforms at the cost of wake-up precision.
    """

    def __init__(
        self,
        host: str,
        port: Any,
        timeout: Any = 0,
        interval: float = DEFAULT_INTERVAL,
        *,
        debug: bool = False,
        platform: Platform | None = None,
    ) -> None:
        """Initialize poller.

        Args:
            host: Hostname or IP literal to connect to
            port: Port number (anything that parses as an integer)
            timeout: Whole seconds to keep polling (default: 0, probe once)
            interval: Seconds between probes (default: 0.25)
            debug: Log every failed probe at WARNING level
            platform: Platform used to pick the errno classification
                (default: the running interpreter's)

        Raises:
            ConfigurationError: If port, timeout or interval is invalid
        """
        self._target, self._config = build_config(host, port, timeout, interval, debug)
        self._platform = platform or Platform()
        self._errors = ErrorClassification.for_platform(self._platform)

        if self._config.has_spin_hazard:
            logger.warning(
                f"Polling {self._target} with a zero interval will spin for "
                f"{self._config.timeout}s without yielding"
            )

    @property
    def target(self) -> Target:
        return self._target

    @property
    def config(self) -> PollConfig:
        return self._config

    def __repr__(self) -> str:
        return (
            f"SocketPoller(host={self._target.host!r}, port={self._target.port}, "
            f"timeout={self._config.timeout})"
        )

    def is_open(self) -> bool:
        """Return True if the target starts listening within the timeout.

        Returns:
            True as soon as a probe connects, False once the timeout elapses
        """
        return self._poll_until(lambda deadline: self._listening(deadline) is True)

    def is_closed(self) -> bool:
        """Return True if the target stops listening within the timeout.

        Returns:
            True as soon as a probe is refused, False if no probe was refused
            before the timeout elapsed
        """
        return self._poll_until(lambda deadline: self._listening(deadline) is False)

    def _poll_until(self, predicate: Callable[[float], bool]) -> bool:
        deadline = time.monotonic() + self._config.timeout

        while True:
            if predicate(deadline):
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(self._config.interval, remaining))

    def _listening(self, deadline: float) -> bool | None:
        """Probe the target once.

        A handshake gets at least one interval to complete. One still pending
        after that and after ``deadline`` is undetermined: it neither proves
        the target is listening nor that it has stopped.

        Returns:
            True if connected, False if not connected, None if undetermined

        Raises:
            OSError: For errors that do not mean "nothing is listening"
        """
        host, port = self._target.host, self._target.port

        try:
            addrinfo = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
            sockaddr = addrinfo[0][4]
            handshake_deadline = max(deadline, time.monotonic() + self._config.interval)

            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.setblocking(False)
                while True:
                    code = sock.connect_ex(sockaddr)
                    outcome = self._errors.classify(code)

                    if outcome is ProbeOutcome.CONNECTED:
                        return True
                    if outcome is ProbeOutcome.NOT_CONNECTED:
                        self._log_not_connected(f"errno {code}")
                        return False
                    if outcome is ProbeOutcome.FATAL:
                        raise UnexpectedSocketError(host, port, code)

                    if time.monotonic() >= handshake_deadline:
                        self._log_not_connected("handshake still in progress at deadline")
                        return None
                    time.sleep(self._config.interval)
        except UnexpectedSocketError:
            raise
        except OSError as e:
            if not self._errors.is_not_connected(e):
                raise
            self._log_not_connected(str(e))
            return False

    def _log_not_connected(self, reason: str) -> None:
        if self._config.debug:
            logger.warning(f"{self._target} not connected: {reason}")
