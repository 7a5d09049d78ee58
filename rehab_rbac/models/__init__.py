"""
Tipos del dominio de permisos.
"""

from rehab_rbac.models.role import Action, Resource, Role
