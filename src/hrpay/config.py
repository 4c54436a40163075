"""Application settings loaded from environment variables and ``.env``."""
from __future__ import annotations
from decimal import Decimal
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HRPAY_",
        case_sensitive=False,
        extra="ignore",
    )

    DATA_DIR: Path = Path("data")
    DATABASE_URL: str | None = None
    LOG_LEVEL: str = "INFO"

    DEFAULT_CURRENCY: str = "UGX"

    # uganda_paye | flat | none
    TAX_POLICY: str = "uganda_paye"
    FLAT_TAX_RATE: Decimal = Decimal("0.30")

    API_BASE_URL: str = "http://127.0.0.1:8000"

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def db_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.DATA_DIR / 'hrpay.db'}"


settings = Settings()
