import pytest

from church_ledger.config import LedgerSettings, load_settings


def test_load_settings_prefers_explicit_url(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CHURCH_LEDGER_DATABASE_URL", "sqlite:///env.db")
    assert load_settings("sqlite:///arg.db").database_url == "sqlite:///arg.db"


def test_load_settings_env_precedence(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///generic.db")
    assert load_settings().database_url == "sqlite:///generic.db"

    monkeypatch.setenv("CHURCH_LEDGER_DATABASE_URL", "sqlite:///ledger.db")
    assert load_settings().database_url == "sqlite:///ledger.db"


def test_load_settings_defaults():
    settings = load_settings()
    assert settings.database_url is None
    assert settings.log_level == "INFO"
    assert not settings.is_configured


def test_log_level_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CHURCH_LEDGER_LOG_LEVEL", " debug ")
    assert load_settings().log_level == "DEBUG"


@pytest.mark.parametrize(
    ("url", "configured"),
    [
        ("sqlite:///ledger.db", True),
        ("postgresql://user@db.example.org/ledger", True),
        ("https://placeholder.supabase.co", False),
        ("   ", False),
        (None, False),
    ],
)
def test_is_configured(url, configured):
    assert LedgerSettings(database_url=url).is_configured is configured
