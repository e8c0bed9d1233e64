import os
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(val: str | None) -> list[str]:
    return [v.strip() for v in (val or "").split(",") if v.strip()]


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Quest Tracker Backend"
    ENV: str = os.getenv("ENV", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Frontend URL used for CORS
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # CORS (schemed origins like https://app.example.org)
    ALLOW_ORIGINS: list[str] = Field(default_factory=list)  # override via ALLOWED_ORIGINS (CSV)
    ALLOW_METHODS: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    ALLOW_HEADERS: list[str] = ["*"]
    ALLOW_CREDENTIALS: bool = True

    # DB
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./quests.db")

    # Quests
    CORE_CATEGORY: str = "core"

    # Auth / JWT
    JWT_SECRET: str = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRES_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRES_MINUTES", "10080"))  # 7 days

    # Cookies
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "access_token")

    # Load .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ---------- Helpers ----------

    def frontend_origins(self) -> list[str]:
        if self.ALLOW_ORIGINS:
            return self.ALLOW_ORIGINS

        return list({
            self.FRONTEND_URL.rstrip("/"),
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        })


def build_settings() -> Settings:
    s = Settings()

    # Ensure psycopg2 for sync sessions
    if s.DATABASE_URL.startswith("postgres://"):
        s.DATABASE_URL = s.DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)
    elif s.DATABASE_URL.startswith("postgresql://"):
        s.DATABASE_URL = s.DATABASE_URL.replace("postgresql://", "postgresql+psycopg2://", 1)

    # Load CORS overrides
    env_origins = _split_csv(os.getenv("ALLOWED_ORIGINS"))
    if env_origins:
        s.ALLOW_ORIGINS = env_origins
    else:
        s.ALLOW_ORIGINS = s.frontend_origins()

    return s


settings = build_settings()
