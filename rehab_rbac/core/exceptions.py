"""
Excepciones HTTP personalizadas para la API.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from rehab_rbac.core.constants import UNAUTHENTICATED_MESSAGE


class CredentialsException(HTTPException):
    """Error de credenciales inválidas (401)."""

    def __init__(self, detail: str = "Credenciales inválidas"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationException(HTTPException):
    """Rechazo de autorización con clasificación y permisos requeridos."""

    code: str = "forbidden"

    def __init__(self, detail: str, required: tuple[str, ...] = ()):
        # Igual que el sistema original: 403 tanto sin identidad como sin permiso
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        self.required = list(required)


class UnauthenticatedException(AuthorizationException):
    """Sin identidad autenticada o sin rol asignado (403)."""

    code = "unauthenticated"

    def __init__(self, detail: str = UNAUTHENTICATED_MESSAGE):
        super().__init__(detail)


class ForbiddenException(AuthorizationException):
    """Error de permisos insuficientes (403)."""

    code = "forbidden"

    def __init__(
        self,
        detail: str = "No tiene permisos para realizar esta acción",
        required: tuple[str, ...] = (),
    ):
        super().__init__(detail, required)


class NotFoundException(HTTPException):
    """Recurso no encontrado (404)."""

    def __init__(self, resource: str = "Recurso", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} no encontrado",
        )


async def authorization_exception_handler(
    request: Request, exc: AuthorizationException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code, "required": exc.required},
    )
