from __future__ import annotations

from pathlib import Path

from studyplanner.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("SCHEDULE_DATABASE_PATH", "PLANNER_TIMEZONE", "SKIP_WEEKENDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.database_path == Path("data/studyplanner.db")
    assert settings.bulk_step_minutes == 30
    assert settings.reschedule_step_minutes == 5
    assert settings.session_minutes == 60
    assert settings.deadline_margin_days == 2
    assert settings.skip_weekends is False


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("SCHEDULE_DATABASE_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("PLANNER_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("SKIP_WEEKENDS", "true")
    monkeypatch.setenv("SESSION_MINUTES", "45")
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.database_path == tmp_path / "x.db"
        assert settings.timezone == "Europe/Berlin"
        assert settings.skip_weekends is True
        assert settings.session_minutes == 45
        assert get_settings() is settings
    finally:
        get_settings.cache_clear()
