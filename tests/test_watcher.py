import logging

from deferq.config import Config
from deferq.taskqueue import TaskQueue
from deferq.watcher import Watcher


def _reserved_queue():
    queue = TaskQueue()
    task_id = queue.add(b"job", 0)
    reservation = queue.reserve()
    return queue, task_id, reservation


def test_check_returns_task_while_attempts_remain():
    queue, task_id, reservation = _reserved_queue()
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=2))
    assert watcher.check(task_id, reservation.stuck_attempts) is True
    assert queue.reserved_tasks_length() == 0
    again = queue.reserve()
    assert again.task_id == task_id
    assert again.stuck_attempts == 1


def test_check_deletes_task_when_attempts_exhausted():
    queue, task_id, _ = _reserved_queue()
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=2))
    assert watcher.check(task_id, 2) is True
    assert queue.tasks_length() == 0
    assert queue.reserved_tasks_length() == 0


def test_zero_max_attempts_always_deletes():
    queue, task_id, reservation = _reserved_queue()
    watcher = Watcher(queue, Config())
    assert watcher.check(task_id, reservation.stuck_attempts) is True
    assert queue.tasks_length() == 0
    assert queue.reserved_tasks_length() == 0


def test_check_unknown_task_reports_failure():
    queue = TaskQueue()
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=1))
    assert watcher.check("missing", 0) is False
    assert Watcher(queue, Config()).check("missing", 0) is False


def test_returned_task_is_delayed_by_stuck_time():
    queue, task_id, _ = _reserved_queue()
    watcher = Watcher(
        queue,
        Config(reserved_task_stuck_time_sec=60, reserved_task_stuck_max_attempts=3),
    )
    assert watcher.check(task_id, 0) is True
    assert queue.tasks_length() == 1
    assert queue.reserve() is None


def test_check_after_acknowledgement_does_nothing():
    queue, task_id, _ = _reserved_queue()
    assert queue.delete(task_id) is True
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=1))
    assert watcher.check(task_id, 0) is False
    assert queue.tasks_length() == 0


def test_watch_for_runs_check_in_background():
    queue, task_id, reservation = _reserved_queue()
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=5))
    timer = watcher.watch_for(task_id, reservation.stuck_attempts)
    timer.join(timeout=5)
    assert not timer.is_alive()
    assert queue.reserved_tasks_length() == 0
    assert queue.reserve().stuck_attempts == 1


def test_watch_for_can_be_cancelled():
    queue, task_id, _ = _reserved_queue()
    watcher = Watcher(queue, Config(reserved_task_stuck_time_sec=60))
    timer = watcher.watch_for(task_id, 0)
    timer.cancel()
    timer.join(timeout=5)
    assert queue.reserved_tasks_length() == 1


def test_profiler_logs_outcome(caplog):
    queue, task_id, _ = _reserved_queue()
    watcher = Watcher(
        queue, Config(profiler_enabled=True, reserved_task_stuck_max_attempts=1)
    )
    with caplog.at_level(logging.INFO, logger="deferq.watcher"):
        watcher.check(task_id, 0)
        watcher.check("missing", 1)
    assert f"Value {task_id} is returned by watcher" in caplog.text
    assert "Watcher can't delete task missing" in caplog.text


def test_no_logging_without_profiler(caplog):
    queue, task_id, _ = _reserved_queue()
    watcher = Watcher(queue, Config(reserved_task_stuck_max_attempts=1))
    with caplog.at_level(logging.INFO, logger="deferq.watcher"):
        assert watcher.check(task_id, 0) is True
    assert caplog.text == ""