"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Agrupa tres bloques:
- API (FastAPI, CORS, logging)
- Base de datos (URL completa o por componentes)
- Sincronizacion de contenido desde WordPress
"""
import json
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Los valores SYNC_* y WORDPRESS_* gobiernan el job de sincronizacion;
    el resto aplica al API.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Horror Stories API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="stories_user")
    DATABASE_PASSWORD: str = Field(default="stories_pass")
    DATABASE_NAME: str = Field(default="stories_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    # WordPress (fuente externa de contenido)
    WORDPRESS_API_URL: str = Field(
        default="https://public-api.wordpress.com/wp/v2/sites/bubbleteameimei.wordpress.com"
    )
    WORDPRESS_PER_PAGE: int = Field(default=20)
    WORDPRESS_CATEGORIES_PER_PAGE: int = Field(default=100)
    WORDPRESS_TIMEOUT_S: float = Field(default=30.0)
    # 0 reintentos = cualquier fallo de pagina aborta de inmediato
    WORDPRESS_MAX_RETRIES: int = Field(default=3)
    WORDPRESS_MIN_BACKOFF_S: float = Field(default=0.8)
    WORDPRESS_MAX_BACKOFF_S: float = Field(default=20.0)

    # Sincronizacion
    SYNC_AUTHOR_EMAIL: str = Field(default="admin@storytelling.com")
    SYNC_AUTHOR_USERNAME: str = Field(default="admin")
    SYNC_DEFAULT_THEME: str = Field(default="General")
    SYNC_EXCERPT_LENGTH: int = Field(default=200)
    SYNC_WORDS_PER_MINUTE: int = Field(default=200)
    SYNC_RUN_TIMEOUT_S: Optional[float] = Field(default=None)

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
