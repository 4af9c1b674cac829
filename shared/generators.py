"""
Random ID and challenge generators: pure, side-effect-free functions.

All generators draw from the ``secrets`` module so captcha IDs and digit
challenges cannot be predicted from earlier output.
"""

from __future__ import annotations

import secrets
import string
from typing import Sequence

from shared.challenge import Challenge

ALPHANUMERIC: bytes = (string.ascii_letters + string.digits).encode("ascii")
DIGITS: tuple[int, ...] = tuple(range(10))


def random_bytes(n: int, alphabet: bytes = ALPHANUMERIC) -> bytes:
    """Generate *n* random bytes, each drawn from *alphabet*.

    The default alphabet keeps the result printable and URL-safe so it can
    be used directly as a captcha ID in a path segment.

    Args:
        n: Number of bytes to generate.
        alphabet: Bytes to draw from (default ASCII letters and digits).

    Returns:
        ``bytes`` of length *n*.
    """
    _check(n, alphabet)
    return bytes(secrets.choice(alphabet) for _ in range(n))


def random_challenge(n: int, alphabet: Sequence[int] = DIGITS) -> Challenge:
    """Generate a challenge of *n* symbols drawn independently from *alphabet*.

    Args:
        n: Challenge length.
        alphabet: Symbol values to draw from (default digits 0-9).

    Returns:
        Immutable tuple of *n* ints.
    """
    _check(n, alphabet)
    return tuple(secrets.choice(alphabet) for _ in range(n))


def generate_captcha_id(length: int = 15) -> str:
    """Generate an opaque captcha ID of *length* alphanumeric characters."""
    return random_bytes(length).decode("ascii")


def _check(n: int, alphabet: Sequence) -> None:
    if n < 0:
        raise ValueError(f"length must be non-negative, got {n}")
    if len(alphabet) == 0:
        raise ValueError("alphabet must not be empty")
