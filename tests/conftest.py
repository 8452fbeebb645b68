import pytest
from stream_fixtures import FakeRedis


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()

    async def _get_redis():
        return fake

    monkeypatch.setattr("repository.preference_repository.get_redis", _get_redis)
    return fake
