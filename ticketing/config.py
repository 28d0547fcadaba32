import logging
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    SQLALCHEMY_DATABASE_URI: str = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///./ticketing.db")
    SQLALCHEMY_POOL_SIZE: int = int(os.getenv("SQLALCHEMY_POOL_SIZE", 30))
    SQLALCHEMY_POOL_MAX_OVERFLOW: int = int(os.getenv("SQLALCHEMY_POOL_MAX_OVERFLOW", 40))
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    SYNC_MAX_BATCH_SIZE: int = int(os.getenv("SYNC_MAX_BATCH_SIZE", 50))
    SYNC_MAX_PHOTO_BYTES: int = int(os.getenv("SYNC_MAX_PHOTO_BYTES", 5 * 1024 * 1024))
    SYNC_SERVER_UPDATES_LIMIT: int = int(os.getenv("SYNC_SERVER_UPDATES_LIMIT", 200))

    PAYMENT_GRACE_DAYS: int = int(os.getenv("PAYMENT_GRACE_DAYS", 14))
    TICKET_PREFIX: str = os.getenv("TICKET_PREFIX", "TKT")
    PAYMENT_PREFIX: str = os.getenv("PAYMENT_PREFIX", "PAY")

    STORAGE_LOCAL_PATH: str = os.getenv("STORAGE_LOCAL_PATH", "./uploads")
    STORAGE_BASE_URL: str = os.getenv("STORAGE_BASE_URL", "http://localhost:8000/uploads")

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "ticketing-sync")
    ALLOW_OTEL_COLLECTOR: str = os.getenv("ALLOW_OTEL_COLLECTOR", "false")
    OTEL_EXPORTER_OTLP_ENDPOINT: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    OTEL_COLLECTOR_ALLOW_INSECURE: str = os.getenv(
        "OTEL_COLLECTOR_ALLOW_INSECURE", "false"
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        arbitrary_types_allowed = True
        env_file = ".env"
        extra = "ignore"


sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
sqlalchemy_logger.setLevel(logging.WARNING)


settings = Settings()
