"""
Servicio de consulta de permisos: arma las respuestas a partir de la tabla.
"""

from rehab_rbac.auth.policies import (
    ACTION_LABELS,
    RESOURCE_LABELS,
    get_role_permission_slugs,
    get_role_permissions,
    has_permission,
    iter_permissions,
    permission_slug,
    PERMISSIONS,
)
from rehab_rbac.models.role import Role
from rehab_rbac.schemas.permissions import (
    PermissionCatalogItem,
    PermissionCheckResponse,
    PolicyMatrixResponse,
    ResourcePolicy,
    RolePermissionsResponse,
)


def list_roles() -> list[str]:
    return [role.value for role in Role]


def is_known_role(role: str) -> bool:
    return role in list_roles()


def role_summary(role: str) -> RolePermissionsResponse:
    return RolePermissionsResponse(
        role=role,
        permissions=get_role_permissions(role),
        slugs=get_role_permission_slugs(role),
    )


def check_permission(resource: str, action: str, role: str) -> PermissionCheckResponse:
    return PermissionCheckResponse(
        resource=resource,
        action=action,
        role=role,
        allowed=has_permission(resource, action, role),
    )


def policy_matrix() -> PolicyMatrixResponse:
    """Tabla completa: por recurso, qué roles tiene cada acción."""
    # Roles ordenados como en el enum para una salida estable
    role_order = list_roles()
    resources = [
        ResourcePolicy(
            resource=resource,
            label=RESOURCE_LABELS.get(resource, (resource, ""))[0],
            grants={
                action: [r for r in role_order if r in roles]
                for action, roles in actions.items()
            },
        )
        for resource, actions in PERMISSIONS.items()
    ]
    return PolicyMatrixResponse(roles=role_order, resources=resources)


def permission_catalog() -> list[PermissionCatalogItem]:
    """Catálogo de permisos 'recurso.acción' con nombre y descripción."""
    items = []
    for resource, action, _ in iter_permissions():
        module_name = RESOURCE_LABELS.get(resource, (resource, ""))[0]
        action_name, action_description = ACTION_LABELS.get(action, (action, action))
        items.append(
            PermissionCatalogItem(
                slug=permission_slug(resource, action),
                resource=resource,
                action=action,
                name=f"{action_name} {module_name}",
                description=f"{action_description} de {module_name.lower()}",
            )
        )
    return items
