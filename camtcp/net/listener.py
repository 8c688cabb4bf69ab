from __future__ import annotations

import socket
import threading

from camtcp.camera.gate import CaptureGate
from camtcp.config import DEFAULT_RECV_BUFFER
from camtcp.logging.audit import audit_event
from camtcp.logging.logger import get_logger
from camtcp.net.errors import AcceptError, ListenerBindError
from camtcp.net.handler import ConnectionHandler


class Listener:
    """Accepts clients and runs each one on its own handler thread."""

    def __init__(
        self,
        host: str,
        port: int,
        gate: CaptureGate,
        recv_buffer_size: int = DEFAULT_RECV_BUFFER,
        backlog: int = 5,
    ):
        self.host = host
        self.port = port
        self._gate = gate
        self._recv_buffer_size = recv_buffer_size
        self._backlog = backlog
        self._logger = get_logger()
        self.running = False
        self.sock: socket.socket | None = None

        self._handlers_lock = threading.Lock()
        self._handler_threads: set[threading.Thread] = set()

    @property
    def address(self) -> tuple[str, int]:
        return self.host, self.port

    @property
    def active_handlers(self) -> int:
        with self._handlers_lock:
            return len(self._handler_threads)

    def bind(self) -> tuple[str, int]:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
            sock.listen(self._backlog)
        except OSError as exc:
            sock.close()
            raise ListenerBindError(f"Could not bind {self.host}:{self.port}: {exc}") from exc
        self.sock = sock
        self.host, self.port = sock.getsockname()[:2]
        self.running = True
        audit_event("listener.start", host=self.host, port=self.port)
        return self.address

    def serve_forever(self) -> None:
        """Accept connections until stop() is called; never waits on a handler."""
        if self.sock is None:
            self.bind()
        self._logger.info("Server started. Waiting for connections on port %s...", self.port)
        while self.running:
            try:
                conn, addr = self._accept()
            except AcceptError as exc:
                if not self.running:
                    break
                self._logger.error("%s", exc)
                continue
            self._spawn_handler(conn, addr)
        self._logger.info("Listener stopped.")

    def _accept(self) -> tuple[socket.socket, tuple]:
        try:
            return self.sock.accept()
        except OSError as exc:
            raise AcceptError(f"Exception in acceptor loop: {exc}") from exc

    def _spawn_handler(self, conn: socket.socket, addr: tuple) -> threading.Thread | None:
        handler = ConnectionHandler(conn, addr, self._gate, self._recv_buffer_size)
        thread = threading.Thread(
            target=self._run_handler,
            args=(handler,),
            name=f"camtcp-handler-{addr[0]}:{addr[1]}",
            daemon=True,
        )
        with self._handlers_lock:
            self._handler_threads.add(thread)
        try:
            thread.start()
        except RuntimeError as exc:
            with self._handlers_lock:
                self._handler_threads.discard(thread)
            self._logger.error("Could not start handler for %s: %s", addr, exc)
            conn.close()
            return None
        return thread

    def _run_handler(self, handler: ConnectionHandler) -> None:
        try:
            handler.run()
        finally:
            with self._handlers_lock:
                self._handler_threads.discard(threading.current_thread())

    def stop(self) -> None:
        """Stop accepting. Handlers already running are left to finish."""
        self.running = False
        if self.sock is not None:
            try:
                self.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass  # not connected on some platforms
            self.sock.close()

    def join_handlers(self, timeout: float | None = None) -> bool:
        """Wait for live handler threads. Returns True if all have finished."""
        with self._handlers_lock:
            threads = list(self._handler_threads)
        for thread in threads:
            thread.join(timeout)
        return self.active_handlers == 0
