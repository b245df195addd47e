from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./shiftgrid.db"

    # Labour rule
    MAX_CONSECUTIVE_WORKING_DAYS: int = 7

    # Automatic break placement
    AUTO_BREAK_MIN_SHIFT_HOURS: float = 6.0
    AUTO_BREAK_MINUTES: int = 30
    BREAK_SNAP_MINUTES: int = 30

    # Persisted start/end for day-off rows (columns are NOT NULL)
    DAY_OFF_SENTINEL_TIME: str = "00:00"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
