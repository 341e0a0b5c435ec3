"""Parsing of protocol lines.

A request is one line of space separated attributes, the first being the
command::

    ADD <DELAY_MS> <TASK_BODY>
    RESERVE
    DELETE <TASK_ID>
    RETURN <TASK_ID> <DELAY_MS>
    STATS
"""

import re
from enum import Enum

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_DECIMAL = re.compile(rb"[+-]?[0-9]+")


class Command(str, Enum):
    """Commands understood by the server."""

    ADD = "ADD"
    RESERVE = "RESERVE"
    DELETE = "DELETE"
    RETURN = "RETURN"
    STATS = "STATS"


class ParseError(ValueError):
    """A request line could not be understood; the message is sent to the client."""


def _as_bytes(message) -> bytes:
    return message.encode() if isinstance(message, str) else bytes(message)


def _attr(message, n: int) -> bytes:
    line = _as_bytes(message).split(b"\n", 1)[0]
    parts = line.split(b" ")
    if len(parts) <= n:
        raise ParseError("few attributes")
    return parts[n]


def parse_command(message) -> Command:
    """Return the command named by the first attribute."""
    name = _attr(message, 0)
    try:
        return Command(name.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise ParseError("unknown command") from None


def parse_delay_ms(message, n) -> int:
    """Return attribute ``n`` as a delay in milliseconds.

    The value must fit a signed 32-bit integer; negative values wrap to
    their unsigned 32-bit counterparts.
    """
    try:
        raw = _attr(message, n)
    except ParseError:
        raise ParseError("invalid DELAY_MS attr") from None
    if not _DECIMAL.fullmatch(raw):
        raise ParseError("invalid DELAY_MS attr")
    value = int(raw)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ParseError("invalid DELAY_MS attr")
    return value & 0xFFFFFFFF


def parse_task_id(message, n) -> str:
    """Return attribute ``n`` as a task identifier."""
    try:
        raw = _attr(message, n)
    except ParseError:
        raise ParseError("invalid TASK_ID attr") from None
    return raw.decode("utf-8", errors="surrogateescape")


def parse_task_body(message, n) -> bytes:
    """Return attribute ``n`` as a task body."""
    try:
        return _attr(message, n)
    except ParseError:
        raise ParseError("invalid TASK_BODY attr") from None