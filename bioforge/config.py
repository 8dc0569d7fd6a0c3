"""
BioForge Runtime Configuration

All settings come from environment variables so the same code runs locally
(JSON state file) and against Postgres (DATABASE_URL).
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""
    state_path: str = "./bioforge_state.json"
    database_url: Optional[str] = None
    state_key: str = "bioforgeos-storage"
    catalog_path: Optional[str] = None
    autosave: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            state_path=os.getenv("BIOFORGE_STATE_PATH", "./bioforge_state.json"),
            database_url=os.getenv("DATABASE_URL") or None,
            state_key=os.getenv("BIOFORGE_STATE_KEY", "bioforgeos-storage"),
            catalog_path=os.getenv("BIOFORGE_CATALOG_PATH") or None,
            autosave=_env_flag("BIOFORGE_AUTOSAVE"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings.from_env()
