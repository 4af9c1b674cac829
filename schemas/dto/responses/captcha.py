"""
Response DTOs for captcha endpoints.

CaptchaCreatedResponse — GET {url_prefix}new.json
VerifyResponse         — POST {url_prefix}verify
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CaptchaCreatedResponse(BaseModel):
    """A freshly created captcha and where to fetch its image."""

    model_config = ConfigDict(populate_by_name=True)

    captcha_id: str
    image_url: str


class VerifyResponse(BaseModel):
    """Outcome of a verify attempt. ``success`` is False for any failure."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
