from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Calendar days and months of payments are attributed in this zone.
    school_timezone: str = Field("Asia/Kolkata", alias="SCHOOL_TIMEZONE")

    # False keeps the latest-dated active fee even when it only takes effect in the future.
    fee_schedule_respect_effective_date: bool = Field(False, alias="FEE_SCHEDULE_RESPECT_EFFECTIVE_DATE")
    unpaid_top_n: int = Field(10, alias="UNPAID_TOP_N")
    recent_transactions_limit: int = Field(5, alias="RECENT_TRANSACTIONS_LIMIT")


    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
