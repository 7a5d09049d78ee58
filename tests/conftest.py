"""
Fixtures compartidas para Pytest.
Configura JWT de test y clientes HTTP.
"""

import os

# Antes de importar la app: get_settings() queda cacheado al importar
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-para-pruebas-de-rbac-0123456789"
os.environ["POLICY_STRICT"] = "false"

from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rehab_rbac.auth.jwt import create_access_token
from rehab_rbac.main import app
from rehab_rbac.models.role import Role


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test contra la app principal."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Genera headers Authorization con un token para el rol indicado."""

    def _headers(role: str | None, **extra_claims) -> dict[str, str]:
        token = create_access_token("user-test", role, extra_claims=extra_claims or None)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(auth_headers) -> dict[str, str]:
    return auth_headers(Role.ADMINISTRATOR.value)


@pytest.fixture
def therapist_headers(auth_headers) -> dict[str, str]:
    return auth_headers(Role.THERAPIST.value)


@pytest.fixture
def coordinator_headers(auth_headers) -> dict[str, str]:
    return auth_headers(Role.COORDINATOR.value)
