"""
Centralized application configuration
"""
import json
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment / .env"""

    # API Settings
    API_TITLE: str = "DarkStore API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend da loja DarkStore: catálogo, checkout, pedidos e integrações"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""
    DB_AUTO_CREATE: bool = False
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = "media"

    # Auth
    AUTH_SECRET: str = ""
    AUTH_TOKEN_TTL_MINUTES: int = 720
    CRON_SECRET: Optional[str] = None
    RATE_LIMIT_ENABLED: bool = True

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:3001"

    # Storefront
    PUBLIC_BASE_URL: str = "http://localhost:3001"
    STORE_NAME: str = "VENTURE"
    STORE_CITY: str = "Caconde"
    STORE_TIMEZONE: str = "America/Sao_Paulo"
    CURRENCY_ID: str = "BRL"

    # Business rules
    PARTNER_DISCOUNT_PCT: Decimal = Decimal("7.5")
    ABANDONED_CART_MINUTES: int = 30

    # External APIs
    MP_ACCESS_TOKEN: str = ""
    MP_API_URL: str = "https://api.mercadopago.com"
    WEBHOOK_TIMEOUT: float = 10.0
    CHATWOOT_DELAY_MIN_SECONDS: float = 8.0
    CHATWOOT_DELAY_MAX_SECONDS: float = 15.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def database_url(self) -> str:
        # Railway / Heroku style
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL


settings = Settings()
