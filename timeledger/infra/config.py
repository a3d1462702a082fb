"""
Configuration management using Pydantic Settings.

Architecture Decision: One source for paths
Settings resolves the config and data directories once; the database engine
asks Settings for its default URL instead of computing its own location.
Environment variables (TIMELEDGER_*) and `.env` override the defaults, and
the ledger preferences come from a YAML file when one exists.
"""

import os
from pathlib import Path
from typing import Optional
import yaml

from pydantic_settings import BaseSettings, SettingsConfigDict
from timeledger.domain.models import LedgerPreferences

PREFERENCES_FILE = "settings.yaml"


def _user_dir(kind: str) -> Path:
    """Per-user base directory: %APPDATA% on Windows, XDG-style elsewhere"""
    if os.name == 'nt':
        return Path(os.getenv('APPDATA'))
    if kind == "config":
        return Path.home() / '.config'
    return Path.home() / '.local' / 'share'


class Settings(BaseSettings):
    """
    Ledger settings.

    Precedence, lowest first: defaults, YAML preferences, environment.
    Only the data directory is created on load; the config directory is
    created the first time preferences are saved.
    """
    model_config = SettingsConfigDict(
        env_prefix='TIMELEDGER_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    app_name: str = "TimeLedger"
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None
    log_level: str = "INFO"

    preferences: LedgerPreferences = LedgerPreferences()

    def model_post_init(self, __context) -> None:
        slug = self.app_name.lower()
        if self.config_dir is None:
            self.config_dir = _user_dir("config") / slug
        if self.data_dir is None:
            self.data_dir = _user_dir("data") / slug
        self.preferences = self._read_preferences() or self.preferences

    def _preferences_path(self) -> Path:
        """A config/ folder in the working directory wins over the user config dir"""
        local = Path("config") / PREFERENCES_FILE
        return local if local.exists() else self.config_dir / PREFERENCES_FILE

    def _read_preferences(self) -> Optional[LedgerPreferences]:
        path = self._preferences_path()
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return LedgerPreferences(**data) if data else None

    def save_preferences(self):
        """Write the current preferences to the user config dir"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_dir / PREFERENCES_FILE, 'w', encoding='utf-8') as f:
            yaml.dump(self.preferences.model_dump(mode="json"), f, default_flow_style=False)

    def get_db_url(self) -> str:
        """Configured database URL, or a SQLite file in the data dir"""
        if self.database_url:
            return self.database_url

        self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+aiosqlite:///{self.data_dir / 'timeledger.db'}"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    global _settings
    _settings = Settings()
    return _settings
