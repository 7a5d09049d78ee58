"""
Script para revisar la tabla de permisos por rol.

Uso:
    python scripts/permissions_report.py                  # matriz completa
    python scripts/permissions_report.py --role Therapist # resumen de un rol
    python scripts/permissions_report.py --catalog        # slugs 'recurso.acción'
    python scripts/permissions_report.py --json           # salida JSON
    python scripts/permissions_report.py --check          # valida la tabla (exit 1 si falla)
"""

import argparse
import json
import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rehab_rbac.auth.policies import PolicyConfigurationError, validate_policy_table
from rehab_rbac.services import permission_service


def print_matrix(as_json: bool) -> None:
    matrix = permission_service.policy_matrix()
    if as_json:
        print(json.dumps(matrix.model_dump(), indent=2, ensure_ascii=False))
        return

    actions = ["view", "create", "update", "delete"]
    print(f"{'Recurso':<14}" + "".join(f"{a:<38}" for a in actions))
    print("-" * (14 + 38 * len(actions)))
    for item in matrix.resources:
        cells = [", ".join(item.grants.get(a, [])) or "-" for a in actions]
        print(f"{item.resource:<14}" + "".join(f"{c:<38}" for c in cells))


def print_role(role: str, as_json: bool) -> None:
    summary = permission_service.role_summary(role)
    if as_json:
        print(json.dumps(summary.model_dump(), indent=2, ensure_ascii=False))
        return

    if not permission_service.is_known_role(role):
        print(f"⚠️  Rol desconocido: {role} (no tiene permisos)")
    print(f"Permisos de {role}: {len(summary.slugs)}")
    for resource, actions in summary.permissions.items():
        granted = [a for a, allowed in actions.items() if allowed]
        print(f"  {resource:<14} {', '.join(granted) or '-'}")


def print_catalog(as_json: bool) -> None:
    items = permission_service.permission_catalog()
    if as_json:
        print(json.dumps([i.model_dump() for i in items], indent=2, ensure_ascii=False))
        return
    for item in items:
        print(f"  {item.slug:<22} {item.name}")
    print(f"\nTotal permisos: {len(items)}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Reporte de la tabla de permisos RBAC")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--role", help="Mostrar el resumen de un rol")
    group.add_argument("--catalog", action="store_true", help="Listar los slugs de permisos")
    group.add_argument("--check", action="store_true", help="Validar la tabla de permisos")
    parser.add_argument("--json", action="store_true", help="Salida en JSON")
    args = parser.parse_args()

    if args.check:
        try:
            validate_policy_table()
        except PolicyConfigurationError as exc:
            print(f"❌ {exc}")
            return 1
        print("✅ Tabla de permisos válida")
        return 0

    if args.role:
        print_role(args.role, args.json)
    elif args.catalog:
        print_catalog(args.json)
    else:
        print_matrix(args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
