"""Settings — defaults and REQBIND_ environment overrides."""

from reqbind.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.bodyless_methods == ["GET", "DELETE", "HEAD"]
    assert settings.max_form_files == 1000
    assert settings.log_format == "json"


def test_env_override_upper_cases_methods(monkeypatch):
    monkeypatch.setenv("REQBIND_BODYLESS_METHODS", '["get", "options"]')
    assert Settings().bodyless_methods == ["GET", "OPTIONS"]


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
