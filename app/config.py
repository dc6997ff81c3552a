# app/config.py
"""
Configuration centralisée - variables d'environnement
"""

import os
import logging
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration de l'application chargée depuis l'environnement ou .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # --- Application ---
    APP_NAME: str = "Offer Comparator"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/offer_comparator.log"

    # --- Base de données ---
    DATABASE_URL: str = ""

    # Postgres optionnel (sinon SQLite local)
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "offer_comparator"
    POSTGRES_HOST: str = ""
    POSTGRES_PORT: int = 5432
    SQLITE_PATH: str = "offer_comparator.db"

    # --- Service d'extraction IA (API compatible OpenAI) ---
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 8000

    # --- Comparaison ---
    DEFAULT_CURRENCY: str = "XOF"
    DEFAULT_LANGUAGE: str = "fr"
    DEFAULT_RATE_EUR: float = 655.957
    DEFAULT_RATE_USD: float = 600.0
    CACHE_MAX_ENTRIES: int = 24

    # --- Fichiers ---
    MAX_PDF_PAGES: int = 50
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024
    FILE_WORKERS: int = 4

    # --- Retry ---
    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 1.0

    @property
    def database_url(self) -> str:
        """Priorité absolue à l'URL complète (DATABASE_URL)"""
        _logger = logging.getLogger(__name__)

        url = None
        source = ""

        # 1. Vérifier os.environ directement
        env_url = os.environ.get("DATABASE_URL")
        if env_url:
            url = env_url
            source = "os.environ DATABASE_URL"
        # 2. Vérifier l'attribut Pydantic (chargé via .env ou env vars)
        elif self.DATABASE_URL:
            url = self.DATABASE_URL
            source = "Pydantic DATABASE_URL"
        elif self.POSTGRES_HOST:
            # 3. Composants Postgres individuels
            url = (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
            source = f"composants individuels (host={self.POSTGRES_HOST})"
        else:
            # 4. Fallback SQLite local
            url = f"sqlite:///{self.SQLITE_PATH}"
            source = "SQLite local"

        # postgres:// -> postgresql:// (format accepté par SQLAlchemy)
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
            _logger.info("🔧 Correction URL: postgres:// -> postgresql://")

        _logger.info(f"📊 DB source: {source}")
        return url

    @property
    def default_exchange_rates(self) -> dict[str, float]:
        return {"EUR": self.DEFAULT_RATE_EUR, "USD": self.DEFAULT_RATE_USD}


@lru_cache()
def get_settings() -> Settings:
    """Singleton des settings - cache en mémoire"""
    return Settings()
