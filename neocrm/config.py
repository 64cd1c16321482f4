from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Supabase access tokens (consumed, never issued here)
    SUPABASE_JWT_SECRET: str
    JWT_AUDIENCE: str = "authenticated"

    # Application
    APP_NAME: str = "NeoCRM Access API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    # Tenant scoping
    TENANT_HEADER_NAME: str = "cliente_id"
    TENANT_QUERY_PARAM: str = "cliente_id"
    TENANT_STORAGE_KEY: str = "selected_cliente_id"

    # Backend REST API consumed by tenant-scoped views
    BACKEND_API_URL: str = "http://localhost:3000/api"
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
