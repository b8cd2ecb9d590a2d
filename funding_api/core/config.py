from functools import lru_cache
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field(alias="APP_NAME", default="ZDA Funding Wallet API")
    app_version: str = Field(alias="APP_VERSION", default="1.0.0")
    service_name: str = Field(alias="SERVICE_NAME", default="funding-api")
    environment: str = Field(alias="ENVIRONMENT", default="dev")
    database_url_raw: str = Field(alias="DATABASE_URL")
    database_ssl: bool = Field(alias="DATABASE_SSL", default=True)
    database_echo: bool = Field(alias="DATABASE_ECHO", default=False)
    migrate_on_start: bool = Field(alias="MIGRATE_ON_START", default=False)
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    api_prefix: str = Field(alias="API_PREFIX", default="/api/v1")
    api_version: str = Field(alias="API_VERSION", default="v1")
    cache_max_age: int = Field(alias="CACHE_MAX_AGE", default=30)
    rate_limit_requests: int = Field(alias="RATE_LIMIT_REQUESTS", default=10)
    rate_limit_window_seconds: float = Field(alias="RATE_LIMIT_WINDOW_SECONDS", default=60.0)
    cors_origins: list[str] = Field(alias="CORS_ORIGINS", default=["*"])

    wallet_api_base_url: str = Field(
        alias="WALLET_API_BASE_URL", default="https://api.blockchair.com/zcash/dashboards/address"
    )
    wallet_lookup_timeout_seconds: float = Field(alias="WALLET_LOOKUP_TIMEOUT_SECONDS", default=10.0)
    wallet_max_transactions: int = Field(alias="WALLET_MAX_TRANSACTIONS", default=10)
    zec_to_usd_rate: float = Field(alias="ZEC_TO_USD_RATE", default=72.55)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def database_url(self) -> str:
        """Connection URL for the asyncpg driver.

        Hosted Postgres providers hand out ``postgres://`` URLs with a libpq
        ``sslmode`` query key, neither of which asyncpg understands.
        """
        parts = urlsplit(self.database_url_raw.strip())
        scheme = parts.scheme
        if scheme in ("postgres", "postgresql"):
            scheme = "postgresql+asyncpg"
        params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
        return urlunsplit((scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
