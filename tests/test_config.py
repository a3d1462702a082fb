"""
Tests for settings loading.
"""

from decimal import Decimal

import pytest
import yaml

from timeledger.domain.models import LedgerPreferences
from timeledger.infra.config import Settings


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory so no workspace config or .env is picked up"""
    monkeypatch.chdir(tmp_path)
    for name in ("TIMELEDGER_LOG_LEVEL", "TIMELEDGER_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def make_settings(root):
    return Settings(config_dir=root / "config_home", data_dir=root / "data")


def test_defaults(isolated):
    settings = make_settings(isolated)

    assert settings.log_level == "INFO"
    assert settings.preferences.work_hours_per_day == Decimal("8")
    assert settings.get_db_url() == f"sqlite+aiosqlite:///{isolated / 'data' / 'timeledger.db'}"
    assert (isolated / "data").is_dir()


def test_environment_overrides(isolated, monkeypatch):
    monkeypatch.setenv("TIMELEDGER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TIMELEDGER_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    settings = make_settings(isolated)

    assert settings.log_level == "DEBUG"
    assert settings.get_db_url() == "sqlite+aiosqlite:///:memory:"


def test_preferences_from_workspace_yaml(isolated):
    (isolated / "config").mkdir()
    (isolated / "config" / "settings.yaml").write_text(yaml.dump({"work_hours_per_day": "7.5"}))

    settings = make_settings(isolated)

    assert settings.preferences.work_hours_per_day == Decimal("7.5")


def test_save_and_reload_preferences(isolated):
    settings = make_settings(isolated)
    settings.preferences = LedgerPreferences(work_hours_per_day=Decimal("6"))
    settings.save_preferences()

    reloaded = make_settings(isolated)

    assert (isolated / "config_home" / "settings.yaml").exists()
    assert reloaded.preferences.work_hours_per_day == Decimal("6")


def test_loading_does_not_create_config_dir(isolated):
    make_settings(isolated)

    assert not (isolated / "config_home").exists()


def test_engine_default_follows_settings(isolated, monkeypatch):
    from timeledger.infra import config, db

    monkeypatch.setattr(config, "_settings", make_settings(isolated))
    monkeypatch.setattr(db.DatabaseEngine, "_instance", None)

    engine = db.DatabaseEngine.get_instance()

    assert engine.engine.url.database == str(isolated / "data" / "timeledger.db")
