"""In-memory FIFO work queue with delayed and reserved tasks."""

import threading
import time
from dataclasses import dataclass
from typing import NamedTuple

from deferq.ids import random_id

_ATTEMPTS_MASK = 0xFF


@dataclass
class Task:
    """A unit of work held by the queue."""

    id: str
    body: bytes
    delayed_time: float
    stuck_attempts: int = 0


class Reservation(NamedTuple):
    """What a consumer receives when it reserves a task."""

    task_id: str
    body: bytes
    stuck_attempts: int


def _ready_at(delay_ms: int) -> float:
    now = time.monotonic()
    return now + delay_ms / 1000 if delay_ms > 0 else now


class TaskQueue:
    """Thread-safe queue of pending tasks plus the set of reserved ones."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: list[Task] = []
        self._reserved: dict[str, Task] = {}

    def add(self, body, delay_ms):
        """Append a task that becomes available after ``delay_ms``; return its id."""
        task = Task(id=random_id(), body=bytes(body), delayed_time=_ready_at(delay_ms))
        with self._lock:
            self._pending.append(task)
        return task.id

    def reserve(self):
        """Take the oldest task whose delay has passed, or return None."""
        with self._lock:
            now = time.monotonic()
            for position, task in enumerate(self._pending):
                if task.delayed_time <= now:
                    del self._pending[position]
                    self._reserved[task.id] = task
                    return Reservation(task.id, task.body, task.stuck_attempts)
        return None

    def return_task(self, task_id, delay_ms, is_stuck_attempt):
        """Put a reserved task back at the end of the queue.

        Returns False when no reserved task has this id.
        """
        with self._lock:
            task = self._reserved.pop(task_id, None)
            if task is None:
                return False
            task.delayed_time = _ready_at(delay_ms)
            if is_stuck_attempt:
                task.stuck_attempts = (task.stuck_attempts + 1) & _ATTEMPTS_MASK
            self._pending.append(task)
            return True

    def delete(self, task_id):
        """Drop a reserved task; return False when no reserved task has this id."""
        with self._lock:
            return self._reserved.pop(task_id, None) is not None

    def tasks_length(self):
        """Number of tasks waiting to be reserved."""
        with self._lock:
            return len(self._pending)

    def reserved_tasks_length(self):
        """Number of tasks currently reserved."""
        with self._lock:
            return len(self._reserved)