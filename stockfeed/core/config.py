from typing import List
from decouple import config, Csv


class Settings:
    # --- Database ---
    DB_USER: str = config("DB_USER", default="postgres")
    DB_PASSWORD: str = config("DB_PASSWORD", default="postgres")
    DB_NAME: str = config("DB_NAME", default="postgres")
    DB_HOST: str = config("DB_HOST", default="localhost")
    DB_PORT: int = config("DB_PORT", default=5432, cast=int)
    DATABASE_URL_OVERRIDE: str = config("DATABASE_URL", default="")

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    # --- Market data provider ---
    MARKET_DATA_PROVIDER: str = config("MARKET_DATA_PROVIDER", default="simulated").lower()
    PROVIDER_TIMEOUT: float = config("PROVIDER_TIMEOUT", default=10.0, cast=float)
    BATCH_FETCH_DELAY: float = config("BATCH_FETCH_DELAY", default=0.5, cast=float)
    SIMULATED_PROVIDER_LATENCY: float = config("SIMULATED_PROVIDER_LATENCY", default=0.0, cast=float)

    # --- Query / ingestion defaults ---
    DEFAULT_INTERVAL: str = config("DEFAULT_INTERVAL", default="1m")
    DEFAULT_PERIOD: str = config("DEFAULT_PERIOD", default="1d")
    CHART_FALLBACK_PERIOD: str = config("CHART_FALLBACK_PERIOD", default="1d")
    DEFAULT_CHART_SYMBOL: str = config("DEFAULT_CHART_SYMBOL", default="AAPL")

    # --- Celery ---
    REDIS_HOST: str = config("REDIS_HOST", default="localhost")
    REDIS_PORT: int = config("REDIS_PORT", default=6379, cast=int)

    CELERY_BROKER_URL: str = config(
        "CELERY_BROKER_URL",
        default=f"redis://{REDIS_HOST}:{REDIS_PORT}/0"
    )

    CELERY_RESULT_BACKEND: str = config(
        "CELERY_RESULT_BACKEND",
        default=f"redis://{REDIS_HOST}:{REDIS_PORT}/1"
    )

    CELERY_TIMEZONE: str = config("CELERY_TIMEZONE", default="UTC")
    CELERY_ENABLE_UTC: bool = config("CELERY_ENABLE_UTC", default=True, cast=bool)

    CELERY_BEAT_ENABLED: bool = config("CELERY_BEAT_ENABLED", default=True, cast=bool)

    CELERY_WORKER_CONCURRENCY: int = config(
        "CELERY_WORKER_CONCURRENCY", default=1, cast=int
    )
    LATEST_REFRESH_MINUTES: int = config("LATEST_REFRESH_MINUTES", default=5, cast=int)

    # --- Logging & Debug ---
    SQL_ECHO: bool = config("SQL_ECHO", default=False, cast=bool)
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO").upper()
    SQL_LOG_LEVEL: str = config("SQL_LOG_LEVEL", default="WARNING").upper()
    UVICORN_LOG_LEVEL: str = config("UVICORN_LOG_LEVEL", default="info").upper()
    LOG_DIR: str = config("LOG_DIR", default="logs")
    LOG_TO_FILE: bool = config("LOG_TO_FILE", default=True, cast=bool)

    # --- CORS ---
    CORS_ORIGINS: List[str] = config(
        "CORS_ORIGINS",
        default="http://localhost:3000,http://127.0.0.1:3000",
        cast=Csv(),
    )


settings = Settings()
