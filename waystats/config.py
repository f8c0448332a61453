# config.py – Chargement des paramètres via pydantic-settings

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # — Data Dragon (catalogue statique) —
    DDRAGON_BASE: str = "https://ddragon.leagueoflegends.com"
    DEFAULT_LOCALE: str = "pt_BR"
    FALLBACK_VERSION: str = "14.24.1"  # utilisée si versions.json est injoignable

    # — Remote functions (proxys OP.GG / U.GG) —
    FUNCTIONS_URL: str = "http://localhost:54321/functions/v1"
    FUNCTIONS_KEY: Optional[str] = None  # bearer transmis aux fonctions
    DEFAULT_TIER: str = "platinum_plus"

    # — Cache —
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    STATIC_CACHE_TTL: int = 24 * 3600     # catalogues + version
    ANALYTICS_CACHE_TTL: int = 6 * 3600   # stats OP.GG / U.GG

    # — HTTP —
    HTTP_TIMEOUT: float = 10.0
    HTTP_MAX_RETRIES: int = 3

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
