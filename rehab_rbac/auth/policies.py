"""
Definición de permisos RBAC por rol.
Mapea qué acciones puede realizar cada rol sobre cada recurso.

La tabla se construye una sola vez al importar el módulo y queda congelada
(MappingProxyType + frozenset), por lo que puede compartirse entre hilos y
tareas sin sincronización.
"""

import enum
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from rehab_rbac.models.role import Action, Resource, Role

_A = Role.ADMINISTRATOR
_T = Role.THERAPIST
_C = Role.COORDINATOR

# ── Permisos por recurso ─────────────────────────────
# Formato: {recurso: {acción: [roles permitidos]}}
_GRANTS: dict[Resource, dict[Action, list[Role]]] = {
    Resource.PATIENTS: {
        Action.VIEW: [_A, _T, _C],
        Action.CREATE: [_A, _T],
        Action.UPDATE: [_A, _T],
        Action.DELETE: [_A],
    },
    Resource.THERAPISTS: {
        Action.VIEW: [_A, _T],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
    Resource.APPOINTMENTS: {
        Action.VIEW: [_A, _T, _C],
        Action.CREATE: [_A, _T],
        Action.UPDATE: [_A, _T],
        Action.DELETE: [_A],
    },
    Resource.COORDINATORS: {
        Action.VIEW: [_A, _T, _C],
        Action.CREATE: [_A, _T],
        Action.UPDATE: [_A, _T],
        Action.DELETE: [_A],
    },
    Resource.DIAGNOSES: {
        Action.VIEW: [_A, _T],
        Action.CREATE: [_A, _T],
        Action.UPDATE: [_A, _T],
        Action.DELETE: [_A],
    },
    # Inventario, compras, préstamos y usuarios: solo Administrador
    Resource.PRODUCTS: {
        Action.VIEW: [_A],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
    Resource.PURCHASES: {
        Action.VIEW: [_A],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
    Resource.WAREHOUSE: {
        Action.VIEW: [_A],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
    Resource.LOANS: {
        Action.VIEW: [_A],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
    Resource.USERS: {
        Action.VIEW: [_A],
        Action.CREATE: [_A],
        Action.UPDATE: [_A],
        Action.DELETE: [_A],
    },
}

# ── Etiquetas legibles por módulo ────────────────────
RESOURCE_LABELS: Mapping[str, tuple[str, str]] = MappingProxyType({
    Resource.PATIENTS.value: ("Pacientes", "Gestión de pacientes del centro"),
    Resource.THERAPISTS.value: ("Terapeutas", "Gestión de terapeutas"),
    Resource.APPOINTMENTS.value: ("Citas", "Gestión de citas"),
    Resource.COORDINATORS.value: ("Encargados", "Gestión de encargados de pacientes"),
    Resource.DIAGNOSES.value: ("Diagnósticos", "Gestión de diagnósticos"),
    Resource.PRODUCTS.value: ("Productos", "Gestión de productos"),
    Resource.PURCHASES.value: ("Compras", "Gestión de compras"),
    Resource.WAREHOUSE.value: ("Bodega", "Gestión de bodega e inventario"),
    Resource.LOANS.value: ("Préstamos", "Gestión de préstamos"),
    Resource.USERS.value: ("Usuarios", "Gestión de usuarios del sistema"),
})

ACTION_LABELS: Mapping[str, tuple[str, str]] = MappingProxyType({
    Action.VIEW.value: ("Ver", "Ver listado y detalles"),
    Action.CREATE.value: ("Crear", "Crear nuevos registros"),
    Action.UPDATE.value: ("Actualizar", "Editar registros existentes"),
    Action.DELETE.value: ("Eliminar", "Eliminar registros"),
})


class PolicyConfigurationError(ValueError):
    """La tabla de permisos o un guard hacen referencia a algo inexistente."""


def _freeze(
    grants: Mapping[Resource, Mapping[Action, list[Role]]],
) -> Mapping[str, Mapping[str, frozenset[str]]]:
    return MappingProxyType({
        resource.value: MappingProxyType({
            action.value: frozenset(role.value for role in roles)
            for action, roles in actions.items()
        })
        for resource, actions in grants.items()
    })


PERMISSIONS: Mapping[str, Mapping[str, frozenset[str]]] = _freeze(_GRANTS)


def _key(value) -> str | None:
    # Los Enum hashean por nombre, no por valor: normalizar antes de buscar
    if isinstance(value, enum.Enum):
        value = value.value
    return value if isinstance(value, str) else None


def has_permission(resource: str, action: str, role: str) -> bool:
    """Verifica si un rol tiene permiso para una acción en un recurso."""
    resource_key, action_key, role_key = _key(resource), _key(action), _key(role)
    if resource_key is None or action_key is None or role_key is None:
        return False
    allowed_roles = PERMISSIONS.get(resource_key, {}).get(action_key)
    if not allowed_roles:
        return False
    return role_key in allowed_roles


def get_role_permissions(role: str) -> dict[str, dict[str, bool]]:
    """
    Resumen de capacidades de un rol: para cada recurso y cada acción de la
    tabla, si el rol puede realizarla. Respeta el orden de la tabla.
    """
    return {
        resource: {
            action: has_permission(resource, action, role)
            for action in actions
        }
        for resource, actions in PERMISSIONS.items()
    }


# ── Slugs "recurso.acción" ───────────────────────────
def permission_slug(resource: str, action: str) -> str:
    return f"{_key(resource) or resource}.{_key(action) or action}"


def parse_permission_slug(slug: str) -> tuple[str, str]:
    """Separa 'pacientes.view' en ('pacientes', 'view')."""
    if not isinstance(slug, str):
        raise ValueError(f"Slug de permiso inválido: {slug!r}")
    resource, sep, action = slug.partition(".")
    if not sep or not resource or not action or "." in action:
        raise ValueError(f"Slug de permiso inválido: {slug!r}")
    return resource, action


def has_permission_slug(slug: str, role: str) -> bool:
    try:
        resource, action = parse_permission_slug(slug)
    except ValueError:
        return False
    return has_permission(resource, action, role)


def iter_permissions() -> Iterator[tuple[str, str, frozenset[str]]]:
    """Recorre la tabla como (recurso, acción, roles) en orden de definición."""
    for resource, actions in PERMISSIONS.items():
        for action, roles in actions.items():
            yield resource, action, roles


def get_role_permission_slugs(role: str) -> list[str]:
    """Slugs concedidos al rol, en el orden de la tabla."""
    return [
        permission_slug(resource, action)
        for resource, action, _ in iter_permissions()
        if has_permission(resource, action, role)
    ]


def is_known_permission(resource: str, action: str) -> bool:
    resource_key, action_key = _key(resource), _key(action)
    if resource_key is None or action_key is None:
        return False
    return action_key in PERMISSIONS.get(resource_key, {})


# ── Validación de esquema (arranque) ─────────────────
def validate_policy_table(
    table: Mapping[str, Mapping[str, frozenset[str]]] = PERMISSIONS,
) -> None:
    """
    Comprueba que la tabla cubre todos los recursos y acciones conocidos,
    que ningún permiso queda sin roles y que solo aparecen roles conocidos.

    Lanza PolicyConfigurationError con la lista completa de problemas.
    """
    known_roles = {role.value for role in Role}
    expected_actions = [action.value for action in Action]
    problems: list[str] = []

    for resource in Resource:
        if resource.value not in table:
            problems.append(f"falta el recurso '{resource.value}'")

    for resource, actions in table.items():
        if resource not in RESOURCE_LABELS:
            problems.append(f"recurso desconocido '{resource}'")
        for action in expected_actions:
            if action not in actions:
                problems.append(f"'{resource}' no define la acción '{action}'")
        for action, roles in actions.items():
            if action not in expected_actions:
                problems.append(f"'{resource}' define una acción desconocida '{action}'")
            if not roles:
                problems.append(f"'{resource}.{action}' no tiene roles asignados")
            unknown = sorted(set(roles) - known_roles)
            if unknown:
                problems.append(
                    f"'{resource}.{action}' referencia roles desconocidos: {', '.join(unknown)}"
                )

    if problems:
        raise PolicyConfigurationError(
            "Tabla de permisos inválida: " + "; ".join(problems)
        )
