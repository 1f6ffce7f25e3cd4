"""
Configuración del servicio de gestión de camareros
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Configuration
    APP_NAME: str = "Gestión de Camareros - API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./gestion_camareros.db"

    # CORS Configuration
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost"
    ]

    # Service Configuration
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8000
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # Seguridad: secreto compartido para peticiones mutantes (vacío = modo desarrollo)
    FUNCTION_SECRET: str = ""

    # WhatsApp Business (Cloud API)
    WHATSAPP_API_KEY: str = ""
    WHATSAPP_PHONE_ID: str = ""
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v18.0"

    # Webhook de nóminas (se dispara al completar un fichaje)
    WEBHOOK_NOMINAS_URL: str = ""
    HTTP_TIMEOUT: float = 10.0

    # Rate limiting
    RATE_LIMIT_BACKEND: str = "memory"  # memory | redis
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    REDIS_URL: str = "redis://localhost:6379/0"

    # Serializa escrituras por (pedido, camarero) dentro del proceso
    SERIALIZE_WRITES: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
