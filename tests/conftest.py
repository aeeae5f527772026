import pytest

from portfolio_api.core import config

TEST_JWT_SECRET = 'test-secret-key-with-at-least-32-bytes'


@pytest.fixture(autouse=True)
def fast_test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    # bcrypt's minimum cost keeps the suite fast.
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', 4)
    monkeypatch.setattr(config, 'JWT_SECRET_KEY', TEST_JWT_SECRET)
