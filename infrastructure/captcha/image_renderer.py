"""PNG renderer for digit challenges, backed by the ``captcha`` library.

ImageCaptcha instances load their fonts on creation, so one is kept per
image size and reused across requests.
"""

from __future__ import annotations

from captcha.image import ImageCaptcha

from shared.challenge import Challenge, encode_challenge
from shared.logging import get_logger

log = get_logger(__name__)


class ImageCaptchaRenderer:
    media_type = "image/png"

    def __init__(self, fonts: list[str] | None = None) -> None:
        self._fonts = fonts
        self._generators: dict[tuple[int, int], ImageCaptcha] = {}

    def _generator(self, width: int, height: int) -> ImageCaptcha:
        size = (width, height)
        generator = self._generators.get(size)
        if generator is None:
            generator = ImageCaptcha(width=width, height=height, fonts=self._fonts)
            self._generators[size] = generator
            log.debug("captcha_renderer_created", width=width, height=height)
        return generator

    def render(self, challenge: Challenge, width: int, height: int) -> bytes:
        """Render *challenge* as a PNG of *width* x *height* pixels."""
        if not challenge:
            raise ValueError("cannot render an empty challenge")
        data = self._generator(width, height).generate(
            encode_challenge(challenge), format="png"
        )
        return data.getvalue()
