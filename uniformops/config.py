import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(default="", alias="DATABASE_URL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")
    default_area_code: str = Field(default="98", alias="DEFAULT_AREA_CODE")
    fallback_school: str = Field(default="TRINUM", alias="FALLBACK_SCHOOL")
    import_chunk_size: int = Field(default=20, alias="IMPORT_CHUNK_SIZE", gt=0)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> "Settings":
    return Settings()


def normalize_database_url(url: str) -> str:
    u = (url or "").strip()
    if not u:
        return "sqlite:///./uniformops.db"
    if u.startswith("postgres://"):
        u = "postgresql+psycopg2://" + u[len("postgres://"):]
    return u


def configure_logging(level: str | None = None) -> None:
    level = (level or get_settings().log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
