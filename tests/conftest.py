import pytest

from config import CaptchaSettings
from infrastructure.cache.memory_store import MemoryChallengeStore
from services.captcha_service import CaptchaService


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryChallengeStore(clock=clock)


@pytest.fixture
def captcha_settings():
    return CaptchaSettings(_env_file=None)


@pytest.fixture
def service(store, captcha_settings):
    return CaptchaService(store, captcha_settings)
