from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Timeouts (milliseconds)
    # Fallback budget when neither the caller nor the executor supplies one
    DEFAULT_TIMEOUT_MS: int = 30000
    SEQUENCE_STEP_DELAY_MS: int = 500

    # Session bounds
    UNDO_CAPACITY: int = 50
    MAX_SAVED_SCENES: int = 20
    NAVIGATION_HISTORY_CAPACITY: int = 50
    RECENT_HISTORY_COUNT: int = 10

    # Host Configuration
    DEFAULT_TERMINAL_NAME: str = "Executable Talk"
    WORKSPACE_ROOT: Path = Path(".")
    WORKSPACE_TRUSTED: bool = False

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="EXECUTABLE_TALK_", extra="ignore"
    )

# Singleton instance
settings = Settings()
