# deferq

deferq is a small work queue that keeps its tasks in memory and serves them
over a plain line-based TCP protocol. Tasks can be delayed, reserved for
processing, deleted once they are done, or put back in the queue.

It needs nothing beyond the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

## Running the server

```
deferq -h 127.0.0.1 -p 12000
```

The same entry point can be started with `python -m deferq.cli`.

Options:

| Option   | Default     | Meaning |
|----------|-------------|---------|
| `-h`     | `127.0.0.1` | Host to listen on |
| `-p`     | `12000`     | Port to listen on (a number or a service name) |
| `-ict`   | `0`         | Seconds a connection may stay idle before it is closed; `0` means no limit |
| `-rtt`   | `0`         | Seconds a task may stay reserved. When this time runs out and the task is still reserved, the watcher either puts it back in the queue (delayed by the same number of seconds) or deletes it. `0` turns the watcher off |
| `-rta`   | `0`         | How many times the watcher may put a stuck task back before it deletes it. `0` means it deletes the task as soon as its time runs out |
| `-debug` | `0`         | Any non-zero value logs connections and queue activity |

Each option may also be written with two dashes (`--ict 30`).
`deferq --help` (or `-help`) lists all options. The server runs until it is
interrupted with Ctrl-C; if it cannot listen on the address, it logs the error
and exits with status 1.

## Protocol

Each request is one line of space-separated attributes. The first attribute is
the command:

```
ADD <DELAY_MS> <TASK_BODY>     -> TASK <TASK_ID> DELAY <DELAY_MS>ms
RESERVE                        -> TASK <TASK_ID> BODY <TASK_BODY>   or   nil
DELETE <TASK_ID>               -> ok   or   unknown TASK_ID
RETURN <TASK_ID> <DELAY_MS>    -> ok   or   unknown TASK_ID
STATS                          -> TASKS <n> RESERVED <n> CONNECTIONS <n> HEAP <mb>m
```

- Tasks come out in FIFO order; a task whose delay has not yet passed is
  skipped. A task put back with `RETURN` goes to the end of the queue.
- A reserved task stays out of the queue until it is deleted or returned.
  `DELETE` and `RETURN` act only on reserved tasks.
- `DELAY_MS` is a decimal integer in the signed 32-bit range.
- A task body is a single attribute, so it cannot contain spaces.
- Lines may end in `\n` or `\r\n`.
- Malformed requests get a one-line error such as `unknown command`,
  `invalid DELAY_MS attr`, `invalid TASK_ID attr` or `invalid TASK_BODY attr`,
  and the connection stays open.
- `HEAP` is the memory traced by `tracemalloc` when it is running, otherwise
  the process's resident memory read from `/proc/self/statm`, or `0.00` where
  that is not available.

Example session with `nc 127.0.0.1 12000`:

```
ADD 0 hello
TASK 3fK9aZx0Qw DELAY 0ms
RESERVE
TASK 3fK9aZx0Qw BODY hello
DELETE 3fK9aZx0Qw
ok
```

## Using it from Python

The queue on its own:

```python
from deferq.taskqueue import TaskQueue

queue = TaskQueue()
task_id = queue.add(b"payload", 0)        # delay in milliseconds
reservation = queue.reserve()             # Reservation(task_id, body, stuck_attempts) or None
queue.delete(reservation.task_id)         # True if the task was reserved
```

`TaskQueue.return_task(task_id, delay_ms, is_stuck_attempt)` puts a reserved
task back; `tasks_length()` and `reserved_tasks_length()` report the counts.

The TCP service inside your own program:

```python
from deferq.config import Config
from deferq.server import Server

with Server(Config(host="127.0.0.1", port="0")) as server:
    print(server.address)                 # the (host, port) actually bound
    print(server.handle_line(b"STATS"))   # run one request without a socket
    server.serve_forever()                # until server.close() is called
```

`deferq.parser` parses protocol lines on their own (`parse_command`,
`parse_delay_ms`, `parse_task_id`, `parse_task_body`, raising `ParseError`),
and `deferq.watcher.Watcher` handles stuck reserved tasks.

## What it does not do

- Tasks live only in memory: nothing is written to disk, and every task is
  lost when the server stops.
- There is no authentication or encryption; any client that can reach the
  port can add, reserve and delete tasks.