import pytest

from api.config import Settings
from api.controller import CompileRelay
from api.executor import ExecutionOutcome
from api.main import create_app
from api.ratelimit import RateLimiter


class FakeClient:
    """Stands in for JDoodleClient; records submitted scripts."""

    def __init__(self, outcome=None, error=None):
        self.outcome = outcome or ExecutionOutcome(status_code=200, output="hi\n", cpu_time="0.1", memory="1024")
        self.error = error
        self.scripts = []

    def execute(self, script):
        self.scripts.append(script)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def settings():
    return Settings(client_id="id", client_secret="secret", executor_url="https://executor.test/v1/execute")


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def relay(fake_client):
    return CompileRelay(client=fake_client, limiter=RateLimiter(limit=5, window_seconds=60))


@pytest.fixture
def client(relay):
    app = create_app(relay=relay)
    app.config["TESTING"] = True
    return app.test_client()
