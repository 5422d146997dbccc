import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_cors_origins_accept_comma_separated_values():
    settings = Settings(cors_origins="http://a.test, http://b.test")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_cors_origins_accept_json_list():
    settings = Settings(cors_origins='["http://a.test"]')
    assert settings.cors_origins == ["http://a.test"]


def test_log_level_is_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_scheduler_defaults():
    settings = Settings()
    assert settings.scheduler_weight_teacher_preference == 3
    assert settings.scheduler_weight_room_fit == 1
    assert settings.scheduler_weight_balance == 2
    assert settings.scheduler_default_rounding == "up"
