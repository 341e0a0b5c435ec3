"""Background handling of tasks that stay reserved for too long."""

import logging
import threading

from deferq.config import Config
from deferq.taskqueue import TaskQueue

logger = logging.getLogger(__name__)


class Watcher:
    """Returns or deletes a reserved task once its reservation time runs out."""

    def __init__(self, queue: TaskQueue, config: Config):
        self.queue = queue
        self.config = config

    def watch_for(self, task_id, stuck_attempts):
        """Schedule ``check`` after the stuck time; return the started timer."""
        timer = threading.Timer(
            self.config.reserved_task_stuck_time_sec,
            self.check,
            args=(task_id, stuck_attempts),
        )
        timer.daemon = True
        timer.start()
        return timer

    def check(self, task_id, stuck_attempts):
        """Return the task to the queue or delete it; report whether it was found."""
        config = self.config
        if stuck_attempts < config.reserved_task_stuck_max_attempts & 0xFF:
            delay_ms = (config.reserved_task_stuck_time_sec * 1000) & 0xFFFFFFFF
            result = self.queue.return_task(task_id, delay_ms, True)
            done, failed = "Value %s is returned by watcher", "Watcher can't return task %s"
        else:
            result = self.queue.delete(task_id)
            done, failed = "Value %s is deleted by watcher", "Watcher can't delete task %s"
        if config.profiler_enabled:
            logger.info(done if result else failed, task_id)
        return result