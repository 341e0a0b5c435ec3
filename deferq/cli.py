"""Command line entry point of the queue server."""

import argparse
import logging

from deferq.config import Config
from deferq.server import Server

logger = logging.getLogger("deferq")


def _uint(text: str) -> int:
    if not text.isdigit():
        raise argparse.ArgumentTypeError(f"invalid value {text!r}")
    return int(text, 10)


_OPTIONS = (
    ("h", "host", str, "127.0.0.1", "TCP server host"),
    ("p", "port", str, "12000", "TCP server port"),
    ("ict", "ict", _uint, 0,
     "Inactive connection time (in seconds), 0 - without limit"),
    ("rtt", "rtt", _uint, 0,
     "Reserved task life time (in seconds) after which the watcher will delete "
     "the reserved task or add it back to the queue, 0 - disable watcher"),
    ("rta", "rta", _uint, 0,
     "The number of attempts after which the watcher will delete the reserved "
     "task from queue, 0 - watcher delete the reserved task when life time expires"),
    ("debug", "debug", _uint, 0, "Debug profiler, 1 - enable, 0 - disable"),
)


def parse_args(argv=None) -> Config:
    """Build the server configuration from command line arguments."""
    parser = argparse.ArgumentParser(
        prog="deferq",
        description="DefferedQ is a simple and fast work queue.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-help", "--help", action="help", help="show this help message and exit")
    for flag, dest, kind, default, text in _OPTIONS:
        parser.add_argument(f"-{flag}", f"--{flag}", dest=dest, type=kind, default=default, help=text)
    args = parser.parse_args(argv)
    return Config(
        host=args.host,
        port=args.port,
        profiler_enabled=args.debug != 0,
        inactive_connection_time_sec=args.ict,
        reserved_task_stuck_time_sec=args.rtt,
        reserved_task_stuck_max_attempts=args.rta,
    )


def main(argv=None) -> int:
    """Run the queue server until interrupted; return the exit status."""
    config = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(message)s", datefmt="%Y/%m/%d %H:%M:%S"
    )
    server = Server(config)
    try:
        server.start()
    except OSError as exc:
        logger.critical("Error listening: %s", exc)
        return 1
    try:
        logger.info(
            "Listening %s:%s with options -ict=%d -rtt=%d -rta=%d -debug=%s",
            config.host,
            config.port,
            config.inactive_connection_time_sec,
            config.reserved_task_stuck_time_sec,
            config.reserved_task_stuck_max_attempts,
            str(config.profiler_enabled).lower(),
        )
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())