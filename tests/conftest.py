import pytest
from fastapi.testclient import TestClient

from form_gateway.core.config import Settings
from form_gateway.core.rate_limit import RateLimiter
from form_gateway.core.relay import PromptRelay
from form_gateway.main import create_app

from fakes import make_openai_client


@pytest.fixture
def settings():
    return Settings(OPENAI_API_KEY="sk-test", API_DAILY_LIMIT=5, LOG_FILE="", _env_file=None)


@pytest.fixture
def openai_client():
    return make_openai_client('Here is the form: {"components": []} Thanks!')


@pytest.fixture
def relay(openai_client):
    return PromptRelay(openai_client, model="gpt-test")


@pytest.fixture
def rate_limiter(settings):
    return RateLimiter.from_settings(settings)


@pytest.fixture
def client(settings, relay, rate_limiter):
    app = create_app(settings=settings, relay=relay, rate_limiter=rate_limiter)
    return TestClient(app)
