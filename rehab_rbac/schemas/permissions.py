"""
Schemas para consulta de permisos y resumen de capacidades por rol.
"""

from pydantic import BaseModel, Field


# ── Resumen por rol ──────────────────────────────────

class RolePermissionsResponse(BaseModel):
    """Qué puede hacer un rol en cada recurso (para el cliente)."""
    role: str
    permissions: dict[str, dict[str, bool]]
    slugs: list[str] = Field(default_factory=list, description="Permisos concedidos 'recurso.acción'")


class PermissionCheckResponse(BaseModel):
    resource: str
    action: str
    role: str
    allowed: bool


# ── Catálogo y matriz ────────────────────────────────

class PermissionCatalogItem(BaseModel):
    """Permiso individual con etiquetas legibles."""
    slug: str
    resource: str
    action: str
    name: str
    description: str


class ResourcePolicy(BaseModel):
    resource: str
    label: str
    grants: dict[str, list[str]] = Field(description="Acción → roles permitidos")


class PolicyMatrixResponse(BaseModel):
    roles: list[str]
    resources: list[ResourcePolicy]
