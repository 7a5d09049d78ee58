"""
Guards de autorización basados en políticas.

Un guard recuerda uno o varios requisitos (recurso, acción) y decide, para
una identidad ya autenticada, si la operación puede continuar. No conoce
HTTP: devuelve un Decision que la capa de transporte traduce a su respuesta.
"""

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from rehab_rbac.auth.policies import (
    PolicyConfigurationError,
    has_permission,
    is_known_permission,
    permission_slug,
)
from rehab_rbac.core.constants import UNAUTHENTICATED_MESSAGE


class DecisionStatus(str, enum.Enum):
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class GuardMatch(str, enum.Enum):
    """Cómo se combinan los requisitos: todos (AND) o al menos uno (OR)."""
    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class Decision:
    status: DecisionStatus
    reason: str = ""
    required: tuple[str, ...] = ()

    @property
    def allowed(self) -> bool:
        return self.status is DecisionStatus.ALLOWED

    @classmethod
    def allow(cls) -> "Decision":
        return cls(DecisionStatus.ALLOWED)

    @classmethod
    def unauthenticated(cls) -> "Decision":
        return cls(DecisionStatus.UNAUTHENTICATED, UNAUTHENTICATED_MESSAGE)

    @classmethod
    def forbidden(cls, reason: str, required: Iterable[str] = ()) -> "Decision":
        return cls(DecisionStatus.FORBIDDEN, reason, tuple(required))


@dataclass(frozen=True)
class Requirement:
    resource: str
    action: str

    def __post_init__(self):
        for field in ("resource", "action"):
            value = getattr(self, field)
            if isinstance(value, enum.Enum):
                object.__setattr__(self, field, value.value)

    @property
    def slug(self) -> str:
        return permission_slug(self.resource, self.action)

    @classmethod
    def coerce(cls, value) -> "Requirement":
        """Acepta Requirement, tupla (recurso, acción) o dict {resource, action}."""
        if isinstance(value, Requirement):
            return value
        if isinstance(value, Mapping):
            if "resource" not in value or "action" not in value:
                raise TypeError(f"Requisito de permiso inválido: {value!r}")
            return cls(value["resource"], value["action"])
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], value[1])
        raise TypeError(f"Requisito de permiso inválido: {value!r}")


def extract_role(identity) -> str | None:
    """Lee el rol de una identidad (objeto con .role o dict con 'role')."""
    if identity is None:
        return None
    if isinstance(identity, Mapping):
        role = identity.get("role")
    else:
        role = getattr(identity, "role", None)
    if isinstance(role, enum.Enum):
        role = role.value
    if not isinstance(role, str) or not role:
        return None
    return role


class Guard:
    """
    Verificación de autorización reutilizable, configurada una sola vez.

    No guarda estado por petición: check() es una función pura de la
    identidad recibida y de la tabla de permisos.
    """

    __slots__ = ("requirements", "match")

    def __init__(
        self,
        requirements: Iterable,
        match: GuardMatch = GuardMatch.ALL,
        strict: bool = False,
    ):
        reqs = tuple(Requirement.coerce(r) for r in requirements)
        if strict:
            unknown = [r.slug for r in reqs if not is_known_permission(r.resource, r.action)]
            if unknown:
                raise PolicyConfigurationError(
                    f"Permisos no definidos en la tabla: {', '.join(unknown)}"
                )
        object.__setattr__(self, "requirements", reqs)
        object.__setattr__(self, "match", GuardMatch(match))

    def __setattr__(self, name, value):
        raise AttributeError("Guard es inmutable")

    def __repr__(self) -> str:
        slugs = ", ".join(r.slug for r in self.requirements)
        return f"<Guard {self.match.value} [{slugs}]>"

    def check(self, identity) -> Decision:
        role = extract_role(identity)
        if role is None:
            return Decision.unauthenticated()

        if self.match is GuardMatch.ANY:
            if any(has_permission(r.resource, r.action, role) for r in self.requirements):
                return Decision.allow()
            return Decision.forbidden(
                "No tienes los permisos necesarios para esta acción",
                (r.slug for r in self.requirements),
            )

        # Sin requisitos no hay nada que conceder: se deniega
        if not self.requirements:
            return Decision.forbidden("No tienes los permisos necesarios para esta acción")

        missing = [
            r for r in self.requirements
            if not has_permission(r.resource, r.action, role)
        ]
        if not missing:
            return Decision.allow()
        if len(self.requirements) == 1:
            req = self.requirements[0]
            return Decision.forbidden(
                f"No tienes permiso para {req.action} en {req.resource}",
                (req.slug,),
            )
        return Decision.forbidden(
            "Te faltan permisos para esta acción",
            (r.slug for r in missing),
        )


# ── Factories ────────────────────────────────────────
def authorize(resource: str, action: str, strict: bool = False) -> Guard:
    """Guard para un único permiso (recurso, acción)."""
    return Guard([Requirement(resource, action)], GuardMatch.ALL, strict=strict)


def authorize_any(requirements: Iterable, strict: bool = False) -> Guard:
    """Guard que permite si se cumple al menos uno de los requisitos (OR)."""
    return Guard(requirements, GuardMatch.ANY, strict=strict)


def authorize_all(requirements: Iterable, strict: bool = False) -> Guard:
    """Guard que exige todos los requisitos (AND)."""
    return Guard(requirements, GuardMatch.ALL, strict=strict)
