from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheTTLSettings(BaseModel):
    search_seconds: int = 1800
    profile_seconds: int = 3600
    general_news_seconds: int = 300


class FinnhubSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALIST_FINNHUB_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("FINNHUB_API_KEY", "SIGNALIST_FINNHUB_API_KEY"),
    )
    base_url: str = Field(
        default="https://finnhub.io/api/v1",
        validation_alias=AliasChoices("FINNHUB_BASE_URL", "SIGNALIST_FINNHUB_BASE_URL"),
    )
    timeout_seconds: float = 10.0


class GeminiSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALIST_GEMINI_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "SIGNALIST_GEMINI_API_KEY"),
    )
    model: str = "gemini-2.0-flash-lite"
    temperature: float = 0.7


class SmtpSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALIST_SMTP_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    host: str = "smtp.gmail.com"
    port: int = 465
    use_ssl: bool = True
    username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("NODEMAILER_EMAIL", "SIGNALIST_SMTP_USERNAME"),
    )
    password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("NODEMAILER_PASSWORD", "SIGNALIST_SMTP_PASSWORD"),
    )
    sender_name: str = "Signalist"
    timeout_seconds: float = 30.0


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALIST_AUTH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    base_url: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices("BETTER_AUTH_URL", "SIGNALIST_AUTH_BASE_URL"),
    )
    session_cookie_name: str = "better-auth.session_token"
    public_paths: List[str] = Field(
        default_factory=lambda: ["/sign-in", "/sign-up", "/api", "/static", "/assets", "/favicon.ico", "/health"]
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIGNALIST_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "SIGNALIST_DATABASE_URL"),
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "SIGNALIST_REDIS_URL"),
    )
    jobs_queue_name: str = Field(
        default="notifications",
        validation_alias=AliasChoices("JOBS_QUEUE_NAME", "SIGNALIST_JOBS_QUEUE_NAME"),
    )
    base_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("BASE_URL", "SIGNALIST_BASE_URL"),
    )
    email_unsub_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices("EMAIL_UNSUB_SECRET", "SIGNALIST_EMAIL_UNSUB_SECRET"),
    )
    jobs_signing_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("JOBS_SIGNING_KEY", "SIGNALIST_JOBS_SIGNING_KEY"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "SIGNALIST_LOG_LEVEL"),
    )

    news_limit: int = 6
    news_lookback_days: int = 5
    search_limit: int = 15
    daily_news_hour_utc: int = 12
    daily_news_minute: int = 0
    default_country_code: str = "EN"
    popular_symbols: List[str] = Field(
        default_factory=lambda: [
            # Tech Giants
            "AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA", "NFLX", "ORCL", "CRM",
            # Growth
            "ADBE", "INTC", "AMD", "PYPL", "UBER", "ZM", "SPOT", "SQ", "SHOP", "ROKU",
            # Financial & Consumer
            "JPM", "BAC", "V", "MA", "WMT", "KO", "PEP", "DIS", "NKE", "MCD",
        ]
    )

    cache_ttl: CacheTTLSettings = Field(default_factory=CacheTTLSettings)
    finnhub: FinnhubSettings = Field(default_factory=FinnhubSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)


settings = Settings()
