"""TCP front end of the work queue: one request line in, one response line out."""

import logging
import socket
import threading
import time
from dataclasses import dataclass, field

from deferq.config import Config
from deferq.ids import random_id
from deferq.memstats import heap_alloc_mb
from deferq.parser import (
    Command,
    ParseError,
    parse_command,
    parse_delay_ms,
    parse_task_body,
    parse_task_id,
)
from deferq.taskqueue import TaskQueue
from deferq.watcher import Watcher

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """A connected client."""

    sock: socket.socket
    id: str = field(default_factory=random_id)
    start: float = field(default_factory=time.time)


def _shutdown(sock: socket.socket) -> None:
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    sock.close()


class Server:
    """Accepts clients and answers their queue commands."""

    def __init__(self, config=None):
        self.config = config if config is not None else Config()
        self.queue = TaskQueue()
        self.watcher = Watcher(self.queue, self.config)
        self._lock = threading.Lock()
        self._connections: dict[str, Connection] = {}
        self._listener: socket.socket | None = None
        self._stopped = threading.Event()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def address(self):
        """The (host, port) the server is listening on."""
        if self._listener is None:
            raise RuntimeError("server is not started")
        return self._listener.getsockname()[:2]

    def start(self):
        """Bind and listen on the configured host and port; raises OSError on failure."""
        port = self.config.port
        if not port:
            port = 0
        elif port.isdigit():
            port = int(port)
        else:
            port = socket.getservbyname(port, "tcp")
        self._listener = socket.create_server((self.config.host, port))
        self._listener.settimeout(0.2)
        self._stopped.clear()

    def serve_forever(self):
        """Accept connections until ``close`` is called, serving each in a thread."""
        if self._listener is None:
            raise RuntimeError("server is not started")
        while not self._stopped.is_set():
            try:
                sock, _addr = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._stopped.is_set():
                    break
                logger.error("Error connect accept: %s", exc)
                continue
            threading.Thread(
                target=self._handle_connection, args=(Connection(sock),), daemon=True
            ).start()

    def close(self):
        """Stop listening and drop every open connection."""
        self._stopped.set()
        if self._listener is not None:
            self._listener.close()
        with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()
        for connection in connections:
            _shutdown(connection.sock)

    def connections_count(self):
        """Number of clients currently connected."""
        with self._lock:
            return len(self._connections)

    def handle_line(self, line):
        """Execute one request line (without its line break) and return the response."""
        queue = self.queue
        try:
            command = parse_command(line)
            if command is Command.ADD:
                delay_ms = parse_delay_ms(line, 1)
                task_id = queue.add(parse_task_body(line, 2), delay_ms)
                if self.config.profiler_enabled:
                    logger.info(
                        "New task, tasks %d, heap %.2fmb",
                        queue.tasks_length(),
                        heap_alloc_mb(),
                    )
                return f"TASK {task_id} DELAY {delay_ms}ms\n".encode()
            if command is Command.RESERVE:
                reservation = queue.reserve()
                if reservation is None:
                    return b"nil\n"
                if self.config.reserved_task_stuck_time_sec > 0:
                    self.watcher.watch_for(
                        reservation.task_id, reservation.stuck_attempts
                    )
                self._log_counts("Value reserved")
                return b"TASK %s BODY %s\n" % (
                    reservation.task_id.encode(),
                    reservation.body,
                )
            if command is Command.DELETE:
                if not queue.delete(parse_task_id(line, 1)):
                    return b"unknown TASK_ID\n"
                self._log_counts("Value deleted")
                return b"ok\n"
            if command is Command.RETURN:
                task_id = parse_task_id(line, 1)
                delay_ms = parse_delay_ms(line, 2)
                if not queue.return_task(task_id, delay_ms, False):
                    return b"unknown TASK_ID\n"
                self._log_counts("Value returned")
                return b"ok\n"
            if command is Command.STATS:
                return (
                    f"TASKS {queue.tasks_length()} "
                    f"RESERVED {queue.reserved_tasks_length()} "
                    f"CONNECTIONS {self.connections_count()} "
                    f"HEAP {heap_alloc_mb():.2f}m\n"
                ).encode()
            return b"unexpected message\n"
        except ParseError as exc:
            return f"{exc}\n".encode()

    def _log_counts(self, event: str) -> None:
        if self.config.profiler_enabled:
            logger.info(
                "%s, tasks %d, reserved %d, heap %.2fmb",
                event,
                self.queue.tasks_length(),
                self.queue.reserved_tasks_length(),
                heap_alloc_mb(),
            )

    def _handle_connection(self, connection: Connection) -> None:
        with self._lock:
            self._connections[connection.id] = connection
        sock = connection.sock
        try:
            peer = "%s:%s" % sock.getpeername()[:2]
        except OSError:
            peer = "unknown"
        profiler = self.config.profiler_enabled
        if profiler:
            logger.info("New connection %s", peer)

        timeout = self.config.inactive_connection_time_sec
        try:
            sock.settimeout(timeout if timeout > 0 else None)
            with sock.makefile("rb") as reader:
                while True:
                    try:
                        raw = reader.readline()
                    except (OSError, ValueError) as exc:
                        if not self._stopped.is_set():
                            logger.error("Error read buffer %s", exc)
                        break
                    if not raw:
                        if profiler:
                            logger.info("Disconnection %s", peer)
                        break
                    line = raw.removesuffix(b"\n").removesuffix(b"\r")
                    sock.sendall(self.handle_line(line))
        except OSError:
            pass
        finally:
            with self._lock:
                dropped = self._connections.pop(connection.id, None)
            if dropped is not None:
                _shutdown(dropped.sock)