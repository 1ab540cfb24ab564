from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Used by the balance endpoint when the employee has no active contract
    default_vacation_days: int = Field(22, alias="DEFAULT_VACATION_DAYS", ge=0)
    # Edits keep the day counts computed at creation unless this is on
    recompute_days_on_update: bool = Field(False, alias="RECOMPUTE_DAYS_ON_UPDATE")
    reject_past_start_dates: bool = Field(False, alias="REJECT_PAST_START_DATES")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("text", alias="LOG_FORMAT")  # text | json

    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
