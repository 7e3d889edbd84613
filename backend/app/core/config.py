"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Boutique Storefront API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "API de la tienda: catálogo, carrito, WhatsApp y pagos Pagadito"
    API_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = "product-images"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://yourdomain.com" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173,http://localhost:8080"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Admin back office
    AUTH_SECRET: str = "dev-secret-change-me"
    ADMIN_USERNAME: str = "admin"
    # pbkdf2_sha256 hash of the admin password (empty = admin login disabled)
    ADMIN_PASSWORD_HASH: str = ""
    ADMIN_TOKEN_TTL_MINUTES: int = 480

    # Pagadito (simulated gateway)
    PAGADITO_SANDBOX: bool = True
    PAGADITO_SUCCESS_RATE: float = 0.8

    # Store / receipts
    STORE_NAME: str = "BoutiqueMG Whatsapp Shop"
    RECEIPT_TAX_RATE: float = 0.15

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
