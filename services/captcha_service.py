"""
CaptchaService: creates, reloads, displays and verifies digit captchas.

The service keeps no state of its own besides its settings: every pending
challenge lives in the ChallengeStore under ``cache_prefix + captcha_id``
and expires after ``expiration`` seconds.

Verification is single-use. The entry is popped from the store (atomic
get-and-delete) before the answer is compared, so it is gone whether the
answer was right, wrong or malformed, and a correct answer cannot be
replayed. A verify against an unknown, expired or consumed ID looks exactly
like a wrong answer to the caller.
"""

from __future__ import annotations

from html import escape
from typing import Mapping

from config import CaptchaSettings
from errors import NotFoundError, ValidationError
from infrastructure.cache.protocol import ChallengeStore
from shared.challenge import Challenge, answer_matches, decode_challenge, encode_challenge
from shared.generators import DIGITS, generate_captcha_id, random_challenge
from shared.logging import get_logger

log = get_logger(__name__)

_EMBED_TEMPLATE = """<input type="hidden" name="{field}" value="{captcha_id}">
<a class="captcha" href="javascript:" tabindex="-1">
    <img onclick="this.src=('{src}?reload='+(new Date()).getTime())" class="captcha-img" src="{src}">
</a>"""


class CaptchaService:
    def __init__(self, store: ChallengeStore, settings: CaptchaSettings) -> None:
        self._store = store
        self.settings = settings

    def key(self, captcha_id: str) -> str:
        """Return the store key for *captcha_id*."""
        return self.settings.cache_prefix + captcha_id

    def _new_challenge(self) -> Challenge:
        return random_challenge(self.settings.challenge_nums, DIGITS)

    async def create_captcha(self) -> str:
        """Store a fresh challenge under a new ID and return the ID.

        Raises:
            StoreUnavailableError: the challenge could not be stored.
        """
        captcha_id = generate_captcha_id(self.settings.id_length)
        await self._store.set(
            self.key(captcha_id),
            encode_challenge(self._new_challenge()),
            self.settings.expiration,
        )
        log.info("captcha_created", captcha_id=captcha_id)
        return captcha_id

    async def reload_challenge(self, captcha_id: str) -> Challenge:
        """Replace the challenge behind *captcha_id* and restart its TTL.

        Raises:
            ValidationError: *captcha_id* is empty.
            StoreUnavailableError: the challenge could not be stored.
        """
        if not captcha_id:
            raise ValidationError("captcha id is required", field="captcha_id")
        challenge = self._new_challenge()
        await self._store.set(
            self.key(captcha_id),
            encode_challenge(challenge),
            self.settings.expiration,
        )
        log.info("captcha_reloaded", captcha_id=captcha_id)
        return challenge

    async def fetch_for_display(self, captcha_id: str) -> Challenge:
        """Return the current challenge for *captcha_id* without consuming it.

        Raises:
            NotFoundError: no live challenge for this ID.
            StoreUnavailableError: the store could not be read.
        """
        if not captcha_id:
            raise NotFoundError("captcha not found")
        raw = await self._store.get(self.key(captcha_id))
        challenge = decode_challenge(raw)
        if challenge is None:
            if raw is not None:
                log.warning("captcha_entry_corrupt", captcha_id=captcha_id)
            raise NotFoundError("captcha not found")
        return challenge

    async def verify(self, captcha_id: str, answer: str) -> bool:
        """Check *answer* against the challenge for *captcha_id*, once.

        Returns ``False`` for empty input (without touching the store), for
        unknown or expired IDs, and for wrong answers. The stored challenge
        is deleted by the lookup itself.
        """
        if not captcha_id or not answer:
            return False

        raw = await self._store.pop(self.key(captcha_id))
        challenge = decode_challenge(raw)
        if challenge is None:
            log.info("captcha_verify_failed", captcha_id=captcha_id, reason="not_found")
            return False

        if not answer_matches(challenge, answer):
            log.info("captcha_verify_failed", captcha_id=captcha_id, reason="mismatch")
            return False

        log.info("captcha_verified", captcha_id=captcha_id)
        return True

    async def verify_form(self, form: Mapping[str, object]) -> bool:
        """Verify the ID and answer fields of a submitted form."""
        captcha_id = form.get(self.settings.field_id_name)
        answer = form.get(self.settings.field_captcha_name)
        if not isinstance(captcha_id, str) or not isinstance(answer, str):
            return False
        return await self.verify(captcha_id, answer)

    def image_url(self, captcha_id: str) -> str:
        return f"{self.settings.sub_url}{self.settings.url_prefix}{captcha_id}.png"

    def embed_html(self, captcha_id: str) -> str:
        """Hidden ID field plus a click-to-reload captcha image."""
        return _EMBED_TEMPLATE.format(
            field=escape(self.settings.field_id_name),
            captcha_id=escape(captcha_id),
            src=escape(self.image_url(captcha_id)),
        )

    async def create_html(self) -> str:
        """Create a captcha and return its embed markup."""
        return self.embed_html(await self.create_captcha())
