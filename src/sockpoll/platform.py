"""Platform detection and connect-error classification.

Which errno values mean "still connecting", "already connected" or "nothing
is listening" differs between POSIX, Cygwin and Winsock. The sets live here as
data and are selected once per poller.
"""

from __future__ import annotations

import errno
import socket
import sys
from enum import Enum

from pydantic import BaseModel, Field

__all__ = ["Platform", "ProbeOutcome", "ErrorClassification"]

# Winsock codes, as returned by connect_ex on Windows
WSAEINVAL = 10022
WSAEWOULDBLOCK = 10035
WSAEINPROGRESS = 10036
WSAEALREADY = 10037
WSAEISCONN = 10056
WSAENOTCONN = 10057
WSAECONNREFUSED = 10061


class Platform(BaseModel):
    """Identifies the environment the poller runs in."""

    system: str = Field(default_factory=lambda: sys.platform)

    model_config = {"frozen": True}

    @property
    def is_windows(self) -> bool:
        return self.system.startswith("win")

    @property
    def is_cygwin(self) -> bool:
        return self.system.startswith(("cygwin", "msys"))


class ProbeOutcome(str, Enum):
    """What a single connect result means for the probe."""

    CONNECTED = "connected"
    IN_PROGRESS = "in_progress"
    NOT_CONNECTED = "not_connected"
    FATAL = "fatal"


_POSIX_IN_PROGRESS = frozenset({errno.EINPROGRESS, errno.EALREADY, errno.EWOULDBLOCK})
_POSIX_CONNECTED = frozenset({errno.EISCONN})
_POSIX_NOT_CONNECTED = frozenset({errno.ECONNREFUSED, errno.ENOTCONN})


class ErrorClassification(BaseModel):
    """Errno sets consulted by the probe."""

    in_progress: frozenset[int]
    connected: frozenset[int]
    not_connected: frozenset[int]

    model_config = {"frozen": True}

    @classmethod
    def for_platform(cls, platform: Platform) -> "ErrorClassification":
        """Select the classification sets for a platform.

        Args:
            platform: Detected or injected platform

        Returns:
            Classification to use for every probe of one poller
        """
        if platform.is_windows:
            return cls(
                in_progress=frozenset({WSAEWOULDBLOCK, WSAEINPROGRESS, WSAEALREADY}),
                connected=frozenset({WSAEISCONN, WSAEINVAL, errno.EINVAL}),
                not_connected=frozenset(
                    {WSAECONNREFUSED, WSAENOTCONN, errno.ECONNREFUSED, errno.ENOTCONN}
                ),
            )

        not_connected = _POSIX_NOT_CONNECTED
        if platform.is_cygwin:
            not_connected = not_connected | {errno.EPERM}

        return cls(
            in_progress=_POSIX_IN_PROGRESS,
            connected=_POSIX_CONNECTED,
            not_connected=not_connected,
        )

    def classify(self, code: int) -> ProbeOutcome:
        """Map a connect_ex result code to a probe outcome."""
        if code == 0 or code in self.connected:
            return ProbeOutcome.CONNECTED
        if code in self.in_progress:
            return ProbeOutcome.IN_PROGRESS
        if code in self.not_connected:
            return ProbeOutcome.NOT_CONNECTED
        return ProbeOutcome.FATAL

    def is_not_connected(self, exc: OSError) -> bool:
        """Check whether a raised OS error just means nothing is listening."""
        if isinstance(exc, (socket.gaierror, socket.herror)):
            return True
        return exc.errno in self.not_connected
