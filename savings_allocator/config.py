"""Configuration management using Pydantic Settings"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (preference key/value store)
    database_url: str = "sqlite:///./savings_allocator.db"

    # Service
    service_name: str = "savings-allocator"
    log_level: str = "INFO"

    # Catalog: bundled data/banks.json unless overridden
    catalog_path: Optional[str] = None

    # Defaults used when no preference has been stored yet
    default_policy: str = "per_code"
    default_include_new: bool = True
    default_owned_codes: List[str] = ["812", "017", "807", "048", "004"]
    default_cash_amount: int = 1_000_000

    # User enters cash in units of ten thousand
    cash_input_unit: int = 10_000


settings = Settings()
