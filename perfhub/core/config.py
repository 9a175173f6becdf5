import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.APP_NAME = os.environ.get("APP_NAME", "PerformanceHub Export Service")
        self.ENV = os.environ.get("ENV", "development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

        # Database Configuration
        # DATABASE_URL wins over the individual DB_* parts (Supabase hands out a full URL)
        self.DATABASE_URL = os.environ.get("DATABASE_URL", "")
        self.DB_HOST = os.environ.get("DB_HOST", "localhost")
        self.DB_PORT = os.environ.get("DB_PORT", "5432")
        self.DB_USER = os.environ.get("DB_USER", "postgres")
        self.DB_PASS = os.environ.get("DB_PASS", "postgres")
        self.DB_NAME = os.environ.get("DB_NAME", "postgres")
        self.DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))

        # Export Configuration
        self.EXPORT_DATE_FORMAT = os.environ.get("EXPORT_DATE_FORMAT", "%m/%d/%Y")
        self.EXPORT_DATETIME_FORMAT = os.environ.get("EXPORT_DATETIME_FORMAT", "%m/%d/%Y, %I:%M:%S %p")
        self.EXPORT_OUTPUT_DIR = os.environ.get("EXPORT_OUTPUT_DIR", "exports")

        # Trailing window used by analytics when no date range is supplied
        self.ANALYTICS_WINDOW_DAYS = int(os.environ.get("ANALYTICS_WINDOW_DAYS", "90"))

        # Report Configuration
        self.REPORT_BRAND_NAME = os.environ.get("REPORT_BRAND_NAME", "PerformanceHub")

        # CORS
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.environ.get(
                "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
            ).split(",")
            if origin.strip()
        ]

    def __repr__(self):
        return (
            f"Settings(APP_NAME={self.APP_NAME}, ENV={self.ENV}, "
            f"LOG_LEVEL={self.LOG_LEVEL}, DB_HOST={self.DB_HOST}, "
            f"ANALYTICS_WINDOW_DAYS={self.ANALYTICS_WINDOW_DAYS})"
        )


settings = Settings()
