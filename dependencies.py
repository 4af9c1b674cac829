"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain async functions
used with FastAPI's Depends() system.
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import AppSettings
from errors import CaptchaInvalidError
from infrastructure.captcha.protocol import CaptchaRenderer
from services.captcha_service import CaptchaService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_challenge_store(request: Request):
    """Return the ChallengeStore from app.state (Redis or in-memory)."""
    return request.app.state.challenge_store


async def get_captcha_service(request: Request) -> CaptchaService:
    """Return the CaptchaService stored on app.state."""
    return request.app.state.captcha_service


async def get_renderer(request: Request) -> CaptchaRenderer:
    """Return the CaptchaRenderer stored on app.state."""
    return request.app.state.renderer


async def require_captcha(
    request: Request,
    service: CaptchaService = Depends(get_captcha_service),
) -> None:
    """Reject the request unless its form carries a correct captcha answer.

    Add ``dependencies=[Depends(require_captcha)]`` to any form-handling
    route. The captcha is consumed whether or not the answer is right.
    """
    form = await request.form()
    if not await service.verify_form(form):
        raise CaptchaInvalidError(
            "captcha verification failed",
            field=service.settings.field_captcha_name,
        )
