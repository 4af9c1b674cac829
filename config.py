"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

Captcha options use the CAPTCHA_ prefix (CAPTCHA_URL_PREFIX,
CAPTCHA_CHALLENGE_NUMS, ...). Empty strings and zero values fall back to the
documented defaults, so a partially filled .env never produces a captcha
service with, say, a zero-length challenge.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_URL_PREFIX = "/captcha/"
DEFAULT_FIELD_ID_NAME = "captcha_id"
DEFAULT_FIELD_CAPTCHA_NAME = "captcha"
DEFAULT_CHALLENGE_NUMS = 6
DEFAULT_WIDTH = 240
DEFAULT_HEIGHT = 80
DEFAULT_EXPIRATION = 600
DEFAULT_CACHE_PREFIX = "captcha_"
DEFAULT_ID_LENGTH = 15

_DEFAULTS = {
    "url_prefix": DEFAULT_URL_PREFIX,
    "field_id_name": DEFAULT_FIELD_ID_NAME,
    "field_captcha_name": DEFAULT_FIELD_CAPTCHA_NAME,
    "challenge_nums": DEFAULT_CHALLENGE_NUMS,
    "width": DEFAULT_WIDTH,
    "height": DEFAULT_HEIGHT,
    "expiration": DEFAULT_EXPIRATION,
    "cache_prefix": DEFAULT_CACHE_PREFIX,
    "id_length": DEFAULT_ID_LENGTH,
}
_INT_FIELDS = ("challenge_nums", "width", "height", "expiration", "id_length")


class CaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CAPTCHA_", extra="ignore", frozen=True
    )

    # Sub-path the app is mounted under. Default is empty.
    sub_url: str = ""
    # URL prefix of captcha images. Always ends with "/".
    url_prefix: str = DEFAULT_URL_PREFIX
    # Hidden input carrying the captcha ID.
    field_id_name: str = DEFAULT_FIELD_ID_NAME
    # Form field carrying the user's answer.
    field_captcha_name: str = DEFAULT_FIELD_CAPTCHA_NAME
    # Number of digits in a challenge.
    challenge_nums: int = DEFAULT_CHALLENGE_NUMS
    # Image size in pixels.
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    # Seconds a challenge stays verifiable.
    expiration: int = DEFAULT_EXPIRATION
    # Prefix of challenge store keys.
    cache_prefix: str = DEFAULT_CACHE_PREFIX
    # Characters in a captcha ID.
    id_length: int = DEFAULT_ID_LENGTH

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data):
        if not isinstance(data, dict):
            return data
        # Blank values of any field; zeros are handled after int conversion
        for name, default in _DEFAULTS.items():
            value = data.get(name)
            if isinstance(value, str) and not value.strip():
                data[name] = default

        sub_url = data.get("sub_url")
        if isinstance(sub_url, str):
            data["sub_url"] = sub_url.rstrip("/")

        url_prefix = data.get("url_prefix")
        if isinstance(url_prefix, str) and url_prefix and not url_prefix.endswith("/"):
            data["url_prefix"] = url_prefix + "/"
        return data

    @field_validator(*_INT_FIELDS, mode="after")
    @classmethod
    def _zero_to_default(cls, value: int, info: ValidationInfo) -> int:
        if value == 0:
            return _DEFAULTS[info.field_name]
        return value

    @model_validator(mode="after")
    def _check_ranges(self) -> "CaptchaSettings":
        for name in _INT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        return self


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional; without Redis challenges live in process memory
    redis_uri: Optional[str] = None


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "captcha-service"

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    captcha: Optional[CaptchaSettings] = None
    redis: Optional[RedisSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.captcha is None:
            self.captcha = CaptchaSettings()
        if self.redis is None:
            self.redis = RedisSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
