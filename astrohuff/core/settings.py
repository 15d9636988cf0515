"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_env_file() -> Path | str:
    """Choisit le fichier .env: ENV_FILE, puis .env.{APP_ENV}, puis .env."""
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return explicit
    cwd = Path.cwd()
    specific = cwd / f".env.{os.getenv('APP_ENV', 'dev')}"
    if specific.exists():
        return specific
    return cwd / ".env"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "astrohuff-backend"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False

    # JWT/Auth
    JWT_SECRET: str = "dev-secret-change-me-before-any-deploy"
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MIN: int = 60

    # Astrology data provider
    ASTRO_API_URL: str = "https://json.freeastrologyapi.com"
    ASTRO_API_KEY: str | None = None
    ASTRO_OBSERVATION_POINT: str = "topocentric"
    ASTRO_AYANAMSHA: str = "lahiri"
    ASTRO_LANGUAGE: str = "en"
    # None = pas de timeout (un fournisseur lent retarde simplement la réponse)
    HTTP_TIMEOUT_SECONDS: float | None = None

    # Places / geocoding
    GOOGLE_MAPS_API_KEY: str | None = None
    PLACES_API_URL: str = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
    GEOCODE_API_URL: str = "https://maps.googleapis.com/maps/api/geocode/json"

    # Generative text
    LLM_PROVIDER: Literal["gemini", "openai"] = "gemini"
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-pro"
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # AI preview
    FREE_QUESTION_LIMIT: int = 5

    # Rate limit (par client)
    RATE_LIMIT_QPS: int = 5


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
