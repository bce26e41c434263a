import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_defaults():
    config = Settings()
    assert config.counter_cookie_name == "UserActions"
    assert config.counter_cookie_max_age == 730 * 24 * 60 * 60
    assert config.cookie_samesite == "lax"
    assert config.reset_session_actions is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"cookie_samesite": "sometimes"},
        {"session_backend": "memcached"},
        {"session_actions_reset": "lazy"},
        {"session_idle_timeout_seconds": 0},
        {"counter_cookie_max_age_days": 0},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_accumulate_mode_disables_reset():
    assert Settings(session_actions_reset="accumulate").reset_session_actions is False
