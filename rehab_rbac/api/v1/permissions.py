"""
Endpoints de consulta de permisos.
El cliente usa /me para decidir qué pantallas y acciones mostrar.
"""

from fastapi import APIRouter, Depends, Query

from rehab_rbac.auth.dependencies import (
    AuthenticatedIdentity,
    get_current_identity,
    require_permission,
)
from rehab_rbac.auth.guards import extract_role
from rehab_rbac.core.exceptions import NotFoundException
from rehab_rbac.models.role import Action, Resource
from rehab_rbac.schemas.permissions import (
    PermissionCatalogItem,
    PermissionCheckResponse,
    PolicyMatrixResponse,
    RolePermissionsResponse,
)
from rehab_rbac.services import permission_service

router = APIRouter()


@router.get("/me", response_model=RolePermissionsResponse)
async def my_permissions(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    """Resumen de capacidades del usuario actual según su rol."""
    return permission_service.role_summary(extract_role(identity))


@router.get("/check", response_model=PermissionCheckResponse)
async def check_permission(
    resource: str = Query(..., description="Recurso, ej: patients"),
    action: str = Query(..., description="Acción: view, create, update, delete"),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    """
    Indica si el usuario actual puede realizar la acción sobre el recurso.
    Recursos o acciones desconocidos se responden como no permitidos.
    """
    return permission_service.check_permission(resource, action, extract_role(identity))


@router.get("/roles", response_model=list[str])
async def list_roles(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    """Roles conocidos por el sistema."""
    return permission_service.list_roles()


@router.get("/roles/{role}", response_model=RolePermissionsResponse)
async def role_permissions(
    role: str,
    identity: AuthenticatedIdentity = Depends(
        require_permission(Resource.USERS, Action.VIEW)
    ),
):
    """Resumen de capacidades de cualquier rol. Solo administración de usuarios."""
    if not permission_service.is_known_role(role):
        raise NotFoundException("Rol")
    return permission_service.role_summary(role)


@router.get("/matrix", response_model=PolicyMatrixResponse)
async def policy_matrix(
    identity: AuthenticatedIdentity = Depends(
        require_permission(Resource.USERS, Action.VIEW)
    ),
):
    """Tabla completa de permisos por recurso y acción."""
    return permission_service.policy_matrix()


@router.get("/catalog", response_model=list[PermissionCatalogItem])
async def permission_catalog(
    identity: AuthenticatedIdentity = Depends(
        require_permission(Resource.USERS, Action.VIEW)
    ),
):
    """Catálogo de permisos 'recurso.acción' con nombres legibles."""
    return permission_service.permission_catalog()
