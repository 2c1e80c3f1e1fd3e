from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class FixtureSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIXTURE_", extra="forbid")

    # Relative to the working directory, like the app expects it.
    db_path: Path = Path("src/db/fixture.db")
    user_version: int = 1

    log_level: str = "info"
    log_json: bool = False


SETTINGS = FixtureSettings()
