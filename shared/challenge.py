"""
Digit challenge helpers: encoding for the store and answer comparison.

A challenge is an immutable tuple of small ints (0-9). In the store it is
kept as the equivalent ASCII digit string, so ``(3, 0, 7, 9)`` is stored as
``"3079"``.
"""

from __future__ import annotations

import hmac
from typing import Optional, Union

Challenge = tuple[int, ...]


def encode_challenge(challenge: Challenge) -> str:
    """Serialize *challenge* to its digit string."""
    return "".join(str(d) for d in challenge)


def decode_challenge(raw: Union[str, bytes, None]) -> Optional[Challenge]:
    """Deserialize a stored value back into a challenge.

    Returns:
        The challenge, or ``None`` if *raw* is missing or is not a digit
        string (a corrupt entry is treated as absent).
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("ascii")
        except UnicodeDecodeError:
            return None
    return parse_digits(raw)


def parse_digits(text: str) -> Optional[Challenge]:
    """Parse *text* as a sequence of ASCII digits.

    Each character must be in ``'0'..'9'``; its value is the code point minus
    that of ``'0'``. Any other character makes the whole input invalid.

    Returns:
        The parsed digits, or ``None`` if any character is not a digit.
    """
    digits = []
    for ch in text:
        if not "0" <= ch <= "9":
            return None
        digits.append(ord(ch) - ord("0"))
    return tuple(digits)


def answer_matches(challenge: Challenge, answer: str) -> bool:
    """Return ``True`` if *answer* spells out *challenge* digit for digit.

    Length is checked first; after that the comparison runs over the full
    sequence in constant time.
    """
    if len(challenge) != len(answer):
        return False
    parsed = parse_digits(answer)
    if parsed is None:
        return False
    return hmac.compare_digest(bytes(challenge), bytes(parsed))
