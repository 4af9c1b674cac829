"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import AppSettings, CaptchaSettings, LoggingSettings, RedisSettings


_CAPTCHA_VARS = (
    "CAPTCHA_SUB_URL",
    "CAPTCHA_URL_PREFIX",
    "CAPTCHA_FIELD_ID_NAME",
    "CAPTCHA_FIELD_CAPTCHA_NAME",
    "CAPTCHA_CHALLENGE_NUMS",
    "CAPTCHA_WIDTH",
    "CAPTCHA_HEIGHT",
    "CAPTCHA_EXPIRATION",
    "CAPTCHA_CACHE_PREFIX",
    "CAPTCHA_ID_LENGTH",
)


@pytest.fixture
def clean_env(monkeypatch):
    for var in _CAPTCHA_VARS + ("REDIS_URI", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


# ---------------------------------------------------------------------------
# CaptchaSettings
# ---------------------------------------------------------------------------


class TestCaptchaSettings:
    def test_defaults(self, clean_env):
        s = CaptchaSettings()
        assert s.sub_url == ""
        assert s.url_prefix == "/captcha/"
        assert s.field_id_name == "captcha_id"
        assert s.field_captcha_name == "captcha"
        assert s.challenge_nums == 6
        assert s.width == 240
        assert s.height == 80
        assert s.expiration == 600
        assert s.cache_prefix == "captcha_"
        assert s.id_length == 15

    def test_env_overrides(self, clean_env):
        clean_env.setenv("CAPTCHA_CHALLENGE_NUMS", "4")
        clean_env.setenv("CAPTCHA_CACHE_PREFIX", "cpt:")
        s = CaptchaSettings()
        assert s.challenge_nums == 4
        assert s.cache_prefix == "cpt:"

    def test_url_prefix_gets_trailing_slash(self, clean_env):
        assert CaptchaSettings(url_prefix="/img").url_prefix == "/img/"

    def test_sub_url_trailing_slash_stripped(self, clean_env):
        assert CaptchaSettings(sub_url="/app/").sub_url == "/app"

    @pytest.mark.parametrize(
        "field, empty, default",
        [
            ("url_prefix", "", "/captcha/"),
            ("field_id_name", "", "captcha_id"),
            ("field_captcha_name", "", "captcha"),
            ("cache_prefix", "", "captcha_"),
            ("challenge_nums", 0, 6),
            ("width", 0, 240),
            ("height", 0, 80),
            ("expiration", 0, 600),
        ],
    )
    def test_empty_values_fall_back_to_defaults(self, clean_env, field, empty, default):
        s = CaptchaSettings(**{field: empty})
        assert getattr(s, field) == default

    def test_zero_from_env_falls_back(self, clean_env):
        clean_env.setenv("CAPTCHA_EXPIRATION", "0")
        assert CaptchaSettings().expiration == 600

    @pytest.mark.parametrize("raw", ["00", " 0", "+0"])
    @pytest.mark.parametrize(
        "var, field, default",
        [
            ("CAPTCHA_CHALLENGE_NUMS", "challenge_nums", 6),
            ("CAPTCHA_WIDTH", "width", 240),
            ("CAPTCHA_HEIGHT", "height", 80),
            ("CAPTCHA_EXPIRATION", "expiration", 600),
            ("CAPTCHA_ID_LENGTH", "id_length", 15),
        ],
    )
    def test_zero_spellings_from_env_fall_back(self, clean_env, var, field, default, raw):
        clean_env.setenv(var, raw)
        assert getattr(CaptchaSettings(), field) == default

    def test_blank_int_from_env_falls_back(self, clean_env):
        clean_env.setenv("CAPTCHA_CHALLENGE_NUMS", "  ")
        assert CaptchaSettings().challenge_nums == 6

    def test_negative_rejected(self, clean_env):
        with pytest.raises(PydanticValidationError):
            CaptchaSettings(challenge_nums=-1)

    def test_immutable(self, clean_env):
        s = CaptchaSettings()
        with pytest.raises(PydanticValidationError):
            s.expiration = 5


# ---------------------------------------------------------------------------
# RedisSettings / LoggingSettings
# ---------------------------------------------------------------------------


class TestRedisSettings:
    def test_redis_uri_optional(self, clean_env):
        assert RedisSettings().redis_uri is None

    def test_redis_uri_loaded(self, clean_env):
        clean_env.setenv("REDIS_URI", "redis://localhost:6379")
        assert RedisSettings().redis_uri == "redis://localhost:6379"


class TestLoggingSettings:
    def test_defaults(self, clean_env):
        s = LoggingSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


class TestAppSettings:
    def test_sub_configs_populated(self, clean_env):
        s = AppSettings()
        assert isinstance(s.captcha, CaptchaSettings)
        assert isinstance(s.redis, RedisSettings)
        assert isinstance(s.logging, LoggingSettings)

    def test_explicit_sub_config_kept(self, clean_env):
        captcha = CaptchaSettings(challenge_nums=4)
        assert AppSettings(captcha=captcha).captcha.challenge_nums == 4

    def test_is_production(self, clean_env):
        assert AppSettings(env="production").is_production
        assert not AppSettings().is_production
