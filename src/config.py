"""Configuration settings for DayPlanner."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_TOKEN_SECRET = "dev-secret-key-change-in-production"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    # API
    host: str = "0.0.0.0"
    port: int = 7540
    web_dir: str = "web"

    # Database
    dbfile: str = "scheduler.db"
    database_url: str = ""  # Overrides dbfile when set
    database_echo: bool = False

    # Authentication
    password: str = ""  # Empty disables authentication
    token_secret: str = DEFAULT_TOKEN_SECRET
    password_salt: str = "Salt777"
    token_ttl_hours: int = 8

    # Task listing
    tasks_limit: int = 50

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or f"sqlite:///{self.dbfile}"

    class Config:
        env_prefix = "TODO_"
        env_file = ".env"
        env_file_encoding = "utf-8"
