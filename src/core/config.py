"""Engine configuration, overridable through CHESS_ENGINE_* environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Runtime configuration of the game engine."""

    execution_limit: int = Field(default=10_000, gt=0)
    log_level: str = "INFO"
    default_base_minutes: float = Field(default=10, ge=0)
    default_increment_seconds: float = Field(default=0, ge=0)

    model_config = SettingsConfigDict(env_prefix="CHESS_ENGINE_")


settings = EngineSettings()
