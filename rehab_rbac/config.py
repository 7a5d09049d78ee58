"""
Configuración central de la aplicación.
Usa Pydantic BaseSettings para validar variables de entorno.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────
    APP_NAME: str = "Centro de Rehabilitación - Control de Acceso"
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # ── JWT ──────────────────────────────────────────
    # RS256 usa el par de claves en disco; HS256/HS384/HS512 usan JWT_SECRET_KEY
    JWT_ALGORITHM: str = "RS256"
    JWT_PRIVATE_KEY_PATH: str = "./keys/private.pem"
    JWT_PUBLIC_KEY_PATH: str = "./keys/public.pem"
    JWT_SECRET_KEY: str = ""
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 15

    # ── Políticas ────────────────────────────────────
    # Estricto: un guard con recurso/acción inexistente falla al construirse
    POLICY_STRICT: bool = False
    POLICY_VALIDATE_ON_STARTUP: bool = True

    # ── CORS ─────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    # ── JWT Keys (loaded at runtime) ─────────────────
    @property
    def jwt_uses_secret(self) -> bool:
        return self.JWT_ALGORITHM.upper().startswith("HS")

    @property
    def jwt_signing_key(self) -> str:
        if self.jwt_uses_secret:
            return self.JWT_SECRET_KEY
        path = Path(self.JWT_PRIVATE_KEY_PATH)
        if path.exists():
            return path.read_text()
        return ""

    @property
    def jwt_verification_key(self) -> str:
        if self.jwt_uses_secret:
            return self.JWT_SECRET_KEY
        path = Path(self.JWT_PUBLIC_KEY_PATH)
        if path.exists():
            return path.read_text()
        return ""

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
