"""
Gestión de JWT de acceso.
El token lo emite el servicio de autenticación; aquí solo se verifica y,
en desarrollo y pruebas, se emite uno con el rol del usuario.
"""

from datetime import datetime, timedelta, timezone

import jwt

from rehab_rbac.config import get_settings

settings = get_settings()


class TokenType:
    ACCESS = "access"
    REFRESH = "refresh"


def create_access_token(
    subject: str,
    role: str | None,
    extra_claims: dict | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Crea un access token JWT (corta duración) con el rol del usuario."""
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": str(subject),
        "type": TokenType.ACCESS,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    if role is not None:
        payload["role"] = role
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(
        payload,
        settings.jwt_signing_key,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """
    Decodifica y verifica un token JWT.
    Lanza jwt.InvalidTokenError si el token es inválido o expirado.
    """
    return jwt.decode(
        token,
        settings.jwt_verification_key,
        algorithms=[settings.JWT_ALGORITHM],
    )


def decode_token_safe(token: str) -> dict | None:
    """
    Decodifica un token JWT sin lanzar excepciones.
    Retorna None si el token es inválido, expirado o la clave de
    verificación no es utilizable (InvalidKeyError).
    """
    try:
        return decode_token(token)
    except jwt.PyJWTError:
        return None
