"""
Configuration management using Pydantic Settings.

Architecture Decision: Why pydantic-settings?
- Type-safe configuration with validation
- Supports multiple sources (YAML, env vars, defaults)
- The core never reads files or the environment; it only receives the
  already parsed strings from here
"""

import os
from pathlib import Path
from typing import Optional
import yaml

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TogglSettings(BaseModel):
    """Toggl Track credentials"""
    api_token: Optional[str] = None


class ClickUpSettings(BaseModel):
    """ClickUp credentials and the list to pick tasks from"""
    api_token: Optional[str] = None
    list_id: Optional[str] = None


class Settings(BaseSettings):
    """
    Application settings with multiple sources:
    1. Default values (hardcoded)
    2. YAML config file
    3. Environment variables (highest priority)
       e.g. FOCUSHUD_TOGGL__API_TOKEN, FOCUSHUD_CLICKUP__LIST_ID
    """
    model_config = SettingsConfigDict(
        env_prefix='FOCUSHUD_',
        env_nested_delimiter='__',
        env_file='.env',
        env_file_encoding='utf-8',
        # Values read from the YAML file go through setattr
        validate_assignment=True,
    )

    app_name: str = "FocusHUD"
    config_dir: Optional[Path] = None
    config_file: Optional[Path] = None

    toggl: TogglSettings = TogglSettings()
    clickup: ClickUpSettings = ClickUpSettings()

    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    due_today_only: bool = Field(default=True, description="Only offer tasks due today")
    log_level: str = "INFO"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._init_paths()
        self._load_yaml_config()

    def _init_paths(self):
        """Initialize default config directory based on OS"""
        if self.config_dir is None:
            if os.name == 'nt':  # Windows
                base = Path(os.getenv('APPDATA', Path.home()))
            else:  # Linux/Mac
                base = Path.home() / '.config'
            self.config_dir = base / self.app_name.lower()

    def _find_config_file(self) -> Optional[Path]:
        if self.config_file is not None:
            return self.config_file
        # First check in workspace config folder, then the user's config directory
        for candidate in (Path("config/settings.yaml"), self.config_dir / "settings.yaml"):
            if candidate.exists():
                return candidate
        return None

    def _load_yaml_config(self):
        """
        Load values from the YAML file for every field the environment left unset.
        """
        config_file = self._find_config_file()
        if config_file is None or not config_file.exists():
            return

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        # Nested sections merge key by key; explicitly set keys win
        for key, model in (('toggl', TogglSettings), ('clickup', ClickUpSettings)):
            section = config_data.get(key) or {}
            current = getattr(self, key)
            setattr(self, key, model(**{**section, **current.model_dump(exclude_unset=True)}))

        explicitly_set = self.model_fields_set
        for key in ('request_timeout', 'due_today_only', 'log_level'):
            if key not in explicitly_set and key in config_data:
                setattr(self, key, config_data[key])

    @property
    def toggl_enabled(self) -> bool:
        return bool(self.toggl.api_token)

    @property
    def clickup_enabled(self) -> bool:
        return bool(self.clickup.api_token and self.clickup.list_id)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from file"""
    global _settings
    _settings = Settings()
    return _settings
