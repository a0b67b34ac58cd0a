from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    app_name: str = "Trip Booking Engine"
    environment: str = Field("local", validation_alias="ENVIRONMENT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    prevent_car_double_booking: bool = Field(
        True, validation_alias="PREVENT_CAR_DOUBLE_BOOKING"
    )
    reference_max_attempts: int = Field(10, validation_alias="REFERENCE_MAX_ATTEMPTS")
    # Display-only conversion factor; monetary values stay in the catalog unit.
    exchange_rate: float = Field(83.12, validation_alias="EXCHANGE_RATE")


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
