"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Optional, List
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration"""

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Estimate pricing
    PRICE_MULTIPLIER: float = 1.35
    DEFAULT_DISCOUNT_RATE: float = 8.0  # percent
    SUBSCRIPTION_ANNUAL_RATE: float = 0.1
    SUBSCRIPTION_MONTHS: str = "24,36,48,60"
    FIXED_PACKAGE_LOANS: str = "5000000,10000000,15000000"

    # Dashboard
    DEFAULT_DATE_FILTER: str = "3months"
    ALL_TIME_START: str = "2020-01-01"

    # Public links
    PUBLIC_BASE_URL: str = "http://localhost:3000"
    DEFAULT_LANDING_PATH: str = "/products/onev"

    # Web
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    SESSION_COOKIE_MAX_AGE: int = 60 * 60 * 24  # seconds

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_subscription_months(self) -> List[int]:
        """Get subscription terms in months"""
        return [int(m.strip()) for m in self.SUBSCRIPTION_MONTHS.split(",") if m.strip()]

    def get_fixed_package_loans(self) -> List[int]:
        """Get fixed-package loan amounts"""
        return [int(v.strip()) for v in self.FIXED_PACKAGE_LOANS.split(",") if v.strip()]

    def get_cors_origins(self) -> List[str]:
        """Get allowed CORS origins"""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def get_log_path(self) -> Optional[Path]:
        """Get log directory path, creating it when configured"""
        if not self.LOG_DIR:
            return None
        path = Path(self.LOG_DIR)
        path.mkdir(parents=True, exist_ok=True)
        return path


settings = Settings()
