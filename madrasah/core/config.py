from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    APP_NAME: str = "Madrasah Admin"
    AUTH_MODE: Literal["supabase", "mock"] = "mock"

    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    STORAGE_BUCKET: str = "documents"

    CORS_ORIGINS: str = "http://localhost:5173"

    LOG_LEVEL: str = "INFO"
    ERROR_LOCALE: Literal["bn", "en"] = "bn"
    CACHE_TTL_SECONDS: int = 30

    PDF_FONT_PATH: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
