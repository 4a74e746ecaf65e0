"""Loopback listener used by the poller tests."""

from __future__ import annotations

import socket
import threading

from sockpoll.port_utils import free_port


class Listener:
    """Accepts and drops connections on 127.0.0.1 from a background thread.

    Accepting keeps the backlog empty, so a long poll never sees a stalled
    handshake.
    """

    def __init__(self, port: int | None = None) -> None:
        self.host = "127.0.0.1"
        self.port = port or free_port()
        self._sock: socket.socket | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> "Listener":
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.port))
        sock.listen(128)
        sock.settimeout(0.05)
        self._sock = sock
        self._stop.clear()
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def start_after(self, delay: float) -> threading.Timer:
        timer = threading.Timer(delay, self.start)
        timer.start()
        return timer

    def stop_after(self, delay: float) -> threading.Timer:
        timer = threading.Timer(delay, self.stop)
        timer.start()
        return timer

    def _accept_loop(self) -> None:
        assert self._sock is not None
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            conn.close()

    def __enter__(self) -> "Listener":
        return self.start()

    def __exit__(self, *exc: object) -> None:
        self.stop()
