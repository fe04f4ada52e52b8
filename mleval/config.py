from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MLEVAL_", env_file=".env.mleval", extra="ignore"
    )

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["console", "json"] = "console"

    SHOW_PROGRESS: bool = False

    REPORT_PRECISION: int = 4
    REPORT_DIR: str = "reports"


settings = Settings()
