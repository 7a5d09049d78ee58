"""
Dependencies de FastAPI para identidad y autorización.
"""

import logging
from collections.abc import Mapping

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

from rehab_rbac.auth.guards import (
    Decision,
    DecisionStatus,
    Guard,
    authorize,
    authorize_all,
    authorize_any,
    extract_role,
)
from rehab_rbac.auth.jwt import TokenType, decode_token_safe
from rehab_rbac.config import get_settings
from rehab_rbac.core.constants import UNAUTHENTICATED_MESSAGE
from rehab_rbac.core.exceptions import (
    AuthorizationException,
    CredentialsException,
    ForbiddenException,
    UnauthenticatedException,
)

logger = logging.getLogger(__name__)
settings = get_settings()

# ── Security scheme ──────────────────────────────────
# Sin auto_error: la ausencia de token se resuelve en el guard (403)
security = HTTPBearer(auto_error=False)


# ── Identidad autenticada ────────────────────────────
class AuthenticatedIdentity(BaseModel):
    """Datos de la identidad ya autenticada. Solo se lee `role`."""

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    role: str | None = None

    @classmethod
    def from_token_payload(cls, payload: Mapping) -> "AuthenticatedIdentity":
        sub = payload.get("sub", payload.get("user_id"))
        return cls(
            user_id=str(sub) if sub is not None else None,
            role=extract_role(payload),
        )

    @classmethod
    def coerce(cls, value) -> "AuthenticatedIdentity":
        """Normaliza la identidad adjuntada por otro paso (modelo, dict u objeto)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_token_payload(value)
        user_id = getattr(value, "user_id", None)
        return cls(
            user_id=str(user_id) if user_id is not None else None,
            role=extract_role(value),
        )


async def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedIdentity | None:
    """
    Dependency que obtiene la identidad del llamante:
    1. La adjuntada por un paso previo en request.state.identity
    2. O la decodificada del header Authorization: Bearer
    Retorna None si no se presentaron credenciales.
    """
    attached = getattr(request.state, "identity", None)
    if attached is not None:
        return AuthenticatedIdentity.coerce(attached)

    if credentials is None:
        return None

    payload = decode_token_safe(credentials.credentials)
    if payload is None:
        raise CredentialsException("Token inválido o expirado")

    if payload.get("type", TokenType.ACCESS) != TokenType.ACCESS:
        raise CredentialsException("Tipo de token inválido")

    return AuthenticatedIdentity.from_token_payload(payload)


async def get_current_identity(
    identity: AuthenticatedIdentity | None = Depends(get_identity),
) -> AuthenticatedIdentity:
    """Identidad autenticada con rol; 403 si falta."""
    if identity is None or identity.role is None:
        raise UnauthenticatedException()
    return identity


# ── Factory de dependency con permisos ───────────────
def exception_from_decision(decision: Decision) -> AuthorizationException:
    """Traduce un Decision denegado a la excepción HTTP correspondiente."""
    if decision.status is DecisionStatus.UNAUTHENTICATED:
        return UnauthenticatedException(decision.reason or UNAUTHENTICATED_MESSAGE)
    if decision.status is DecisionStatus.FORBIDDEN:
        return ForbiddenException(decision.reason, decision.required)
    raise ValueError("Un Decision permitido no genera excepción")


def require(guard: Guard):
    """
    Factory que crea un dependency a partir de un Guard.

    Uso:
        @router.delete("/{patient_id}")
        async def delete_patient(
            identity=Depends(require(authorize("patients", "delete"))),
        ):
            ...
    """

    async def _check_permission(
        identity: AuthenticatedIdentity | None = Depends(get_identity),
    ) -> AuthenticatedIdentity:
        decision = guard.check(identity)
        if not decision.allowed:
            logger.warning(
                "Acceso denegado (%s): rol=%s guard=%r",
                decision.status.value,
                extract_role(identity),
                guard,
            )
            raise exception_from_decision(decision)
        return identity

    return _check_permission


def require_permission(resource: str, action: str):
    return require(authorize(resource, action, strict=settings.POLICY_STRICT))


def require_any_permission(*requirements):
    """Permite si el rol tiene al menos uno de los permisos (OR)."""
    return require(authorize_any(requirements, strict=settings.POLICY_STRICT))


def require_all_permissions(*requirements):
    """Exige todos los permisos indicados (AND)."""
    return require(authorize_all(requirements, strict=settings.POLICY_STRICT))
