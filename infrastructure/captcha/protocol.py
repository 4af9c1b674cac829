"""CaptchaRenderer protocol — routes depend on this, not the concrete implementation."""

from typing import Protocol

from shared.challenge import Challenge


class CaptchaRenderer(Protocol):
    media_type: str

    def render(self, challenge: Challenge, width: int, height: int) -> bytes: ...
