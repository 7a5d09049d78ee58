"""
Router principal de la API v1.
"""

from fastapi import APIRouter

from rehab_rbac.api.v1.permissions import router as permissions_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    permissions_router,
    prefix="/permissions",
    tags=["Permisos"],
)
