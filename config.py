"""
Configuration module for the Funding Rate Alert Bot.
Loads credentials and runtime settings from environment variables and the
notification schedule from a TOML file.
"""
import tomllib
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigLoadError, MissingCredentialError

SECONDS_PER_DAY = 86_400


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Pushover credentials (required)
    pushover_token: str
    pushover_user_key: str

    # Schedule file with symbols, notification_times and debug_push
    config_path: str = "config.toml"

    # Endpoints
    bybit_rest_url: str = "https://api.bybit.com"
    pushover_api_url: str = "https://api.pushover.net/1/messages.json"

    # Performance Settings
    request_timeout: float = 10.0
    poll_interval: float = 1.0
    # Largest gap between two clock samples for which skipped
    # notification times are still fired
    max_catchup_seconds: int = 60

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class ScheduleConfig(BaseModel):
    """Symbols to watch and the times of day to report them."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    symbols: List[str]
    notification_times: List[int]
    debug_push: bool = False

    @field_validator("symbols")
    @classmethod
    def _symbols_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one symbol is required")
        if any(not symbol.strip() for symbol in value):
            raise ValueError("symbols must not be blank")
        return value

    @field_validator("notification_times")
    @classmethod
    def _times_in_range(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("at least one notification time is required")
        for seconds in value:
            if not 0 <= seconds < SECONDS_PER_DAY:
                raise ValueError(f"{seconds} is outside [0, {SECONDS_PER_DAY - 1}]")
        return value


def get_settings() -> Settings:
    """
    Build application settings from the environment.

    Raises:
        MissingCredentialError: if PUSHOVER_TOKEN or PUSHOVER_USER_KEY is unset
        ConfigLoadError: if another setting has an invalid value
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [
            str(error["loc"][0]).upper()
            for error in e.errors()
            if error["type"] == "missing"
        ]
        if missing:
            raise MissingCredentialError(missing) from e
        raise ConfigLoadError(f"Invalid settings: {e}") from e


def load_schedule_config(path: Union[str, Path]) -> ScheduleConfig:
    """
    Load and validate the schedule config file.

    Args:
        path: Path to a TOML file

    Returns:
        Validated, immutable ScheduleConfig

    Raises:
        ConfigLoadError: if the file is missing, unparsable or invalid
    """
    config_path = Path(path)
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigLoadError(f"Config file not found: {config_path}") from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigLoadError(f"Could not read config file {config_path}: {e}") from e

    try:
        return ScheduleConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid config file {config_path}: {e}") from e
