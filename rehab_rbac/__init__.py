"""
Control de acceso basado en roles (RBAC) del Centro de Rehabilitación.
"""

__version__ = "0.1.0"
