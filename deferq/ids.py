"""Random identifiers for tasks and connections."""

import secrets

ID_LENGTH = 10
ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

_STEP = 255.0 / (len(ID_ALPHABET) - 1)


def _id_from_bytes(data: bytes) -> str:
    """Map each byte onto the alphabet by scaling 0..255 to its index range."""
    return "".join(ID_ALPHABET[round(byte / _STEP)] for byte in data)


def random_id() -> str:
    """Return a new random identifier of ``ID_LENGTH`` alphanumeric characters."""
    return _id_from_bytes(secrets.token_bytes(ID_LENGTH))