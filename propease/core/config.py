from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "PropEase Real Estate CRM"
    environment: str = "dev"
    log_level: str = "INFO"
    timezone: str = "Asia/Kolkata"

    # ─────────── API ───────────
    api_prefix: str = "/api"
    request_id_header: str = "X-Request-Id"

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 15  # browser refreshes every 10 minutes
    jwt_refresh_token_minutes: int = 10080  # 7 days

    # ─────────── WORKFLOW DEFAULTS ───────────
    follow_up_default_days: int = 7
    follow_up_default_time: str = "10:00"
    default_gst_percentage: float = 18.0

    # ─────────── STORAGE ───────────
    upload_dir: str = "uploads"
    snapshot_storage_key: str = "propease_data"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
