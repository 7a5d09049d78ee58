"""
Roles, recursos y acciones del sistema de permisos.
Conjuntos cerrados, conocidos en tiempo de construcción.
"""

import enum


class Role(str, enum.Enum):
    """Roles del sistema. Sin jerarquía: cada permiso lista sus roles."""
    ADMINISTRATOR = "Administrator"
    THERAPIST = "Therapist"
    COORDINATOR = "Coordinator"


class Resource(str, enum.Enum):
    """Recursos protegidos (módulos de la aplicación)."""
    PATIENTS = "patients"
    THERAPISTS = "therapists"
    APPOINTMENTS = "appointments"
    COORDINATORS = "coordinators"
    DIAGNOSES = "diagnoses"
    PRODUCTS = "products"
    PURCHASES = "purchases"
    WAREHOUSE = "warehouse"
    LOANS = "loans"
    USERS = "users"


class Action(str, enum.Enum):
    """Acciones CRUD estándar."""
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
