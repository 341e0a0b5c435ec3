"""Server settings."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Runtime options of the queue server.

    ``inactive_connection_time_sec`` of 0 keeps idle connections open forever;
    ``reserved_task_stuck_time_sec`` of 0 disables the reserved task watcher;
    ``reserved_task_stuck_max_attempts`` of 0 makes the watcher delete a stuck
    task as soon as its time runs out.
    """

    host: str = "127.0.0.1"
    port: str = "12000"
    profiler_enabled: bool = False
    inactive_connection_time_sec: int = 0
    reserved_task_stuck_time_sec: int = 0
    reserved_task_stuck_max_attempts: int = 0