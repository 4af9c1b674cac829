"""
Captcha endpoints, mounted under the configured URL prefix.

GET  {prefix}new         — embed fragment (hidden ID field + image) for a new captcha
GET  {prefix}new.json    — a new captcha ID and its image URL
GET  {prefix}{id}.png    — the challenge image; ``?reload=<anything>`` swaps in a new challenge
POST {prefix}verify      — check the submitted form, consuming the captcha

Status mapping:
- unknown or expired ID on image fetch → 404
- challenge store failure → 500
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, Response

from config import CaptchaSettings
from dependencies import get_captcha_service, get_renderer
from infrastructure.captcha.protocol import CaptchaRenderer
from schemas.dto.responses.captcha import CaptchaCreatedResponse, VerifyResponse
from schemas.dto.responses.common import ErrorResponse
from services.captcha_service import CaptchaService

_NO_STORE = {"Cache-Control": "no-store, max-age=0"}
_STORE_ERROR = {500: {"model": ErrorResponse, "description": "Challenge store unavailable"}}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Captcha not found or expired"}}


def captcha_id_from_filename(filename: str) -> str:
    """Strip everything from the first dot: ``"abc.png"`` → ``"abc"``."""
    return filename.split(".", 1)[0]


def build_captcha_router(settings: CaptchaSettings) -> APIRouter:
    """Build the captcha router for the configured URL prefix."""
    router = APIRouter(prefix=settings.url_prefix.rstrip("/"), tags=["captcha"])

    @router.get("/new", response_class=HTMLResponse, responses=_STORE_ERROR)
    async def new_captcha_html(
        service: CaptchaService = Depends(get_captcha_service),
    ) -> HTMLResponse:
        return HTMLResponse(await service.create_html(), headers=_NO_STORE)

    @router.get("/new.json", response_model=CaptchaCreatedResponse, responses=_STORE_ERROR)
    async def new_captcha(
        service: CaptchaService = Depends(get_captcha_service),
    ) -> CaptchaCreatedResponse:
        captcha_id = await service.create_captcha()
        return CaptchaCreatedResponse(
            captcha_id=captcha_id, image_url=service.image_url(captcha_id)
        )

    @router.post("/verify", response_model=VerifyResponse, responses=_STORE_ERROR)
    async def verify_captcha(
        request: Request,
        service: CaptchaService = Depends(get_captcha_service),
    ) -> VerifyResponse:
        form = await request.form()
        return VerifyResponse(success=await service.verify_form(form))

    @router.get(
        "/{filename}",
        response_class=Response,
        responses={**_NOT_FOUND, **_STORE_ERROR, 200: {"content": {"image/png": {}}}},
    )
    async def captcha_image(
        filename: str,
        request: Request,
        service: CaptchaService = Depends(get_captcha_service),
        renderer: CaptchaRenderer = Depends(get_renderer),
    ) -> Response:
        captcha_id = captcha_id_from_filename(filename)
        if request.query_params.get("reload"):
            challenge = await service.reload_challenge(captcha_id)
        else:
            challenge = await service.fetch_for_display(captcha_id)

        image = await run_in_threadpool(
            renderer.render,
            challenge,
            service.settings.width,
            service.settings.height,
        )
        return Response(content=image, media_type=renderer.media_type, headers=_NO_STORE)

    return router
