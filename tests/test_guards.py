"""
Tests de los guards de autorización (sin HTTP).
"""

from types import SimpleNamespace

import pytest

from rehab_rbac.auth.guards import (
    Decision,
    DecisionStatus,
    Guard,
    GuardMatch,
    Requirement,
    authorize,
    authorize_all,
    authorize_any,
    extract_role,
)
from rehab_rbac.auth.policies import PolicyConfigurationError
from rehab_rbac.core.constants import UNAUTHENTICATED_MESSAGE
from rehab_rbac.models.role import Action, Resource


def identity(role):
    return SimpleNamespace(role=role)


def test_therapist_cannot_delete_patients():
    decision = authorize("patients", "delete").check(identity("Therapist"))
    assert decision.status is DecisionStatus.FORBIDDEN
    assert not decision.allowed
    assert "delete" in decision.reason and "patients" in decision.reason
    assert decision.required == ("patients.delete",)


def test_coordinator_can_view_patients():
    decision = authorize("patients", "view").check(identity("Coordinator"))
    assert decision == Decision.allow()
    assert decision.allowed


@pytest.mark.parametrize("who", [None, SimpleNamespace(), identity(None), identity(""), {}, {"role": None}])
@pytest.mark.parametrize("guard", [
    authorize("patients", "view"),
    authorize("nonexistent", "archive"),
    authorize_any([("patients", "view")]),
    authorize_all([("patients", "view")]),
])
def test_missing_identity_or_role_is_unauthenticated(who, guard):
    decision = guard.check(who)
    assert decision.status is DecisionStatus.UNAUTHENTICATED
    assert decision.reason == UNAUTHENTICATED_MESSAGE


def test_mapping_identity_is_accepted():
    assert authorize("users", "view").check({"role": "Administrator"}).allowed


def test_check_does_not_mutate_identity():
    who = {"role": "Therapist", "user_id": "7"}
    authorize("patients", "view").check(who)
    assert who == {"role": "Therapist", "user_id": "7"}


def test_unknown_resource_is_forbidden_not_error():
    decision = authorize("nonexistent", "view").check(identity("Administrator"))
    assert decision.status is DecisionStatus.FORBIDDEN


# ── authorize_any ────────────────────────────────────

def test_any_allows_when_one_requirement_passes():
    guard = authorize_any([
        {"resource": "products", "action": "view"},
        {"resource": "patients", "action": "view"},
    ])
    assert guard.check(identity("Therapist")).allowed


def test_any_rejects_when_all_fail():
    guard = authorize_any([("products", "view"), ("users", "view")])
    decision = guard.check(identity("Coordinator"))
    assert decision.status is DecisionStatus.FORBIDDEN
    assert decision.required == ("products.view", "users.view")


def test_any_with_no_requirements_denies():
    decision = authorize_any([]).check(identity("Administrator"))
    assert decision.status is DecisionStatus.FORBIDDEN


# ── authorize_all ────────────────────────────────────

def test_all_reports_missing_permissions():
    guard = authorize_all([
        ("patients", "view"),
        ("patients", "delete"),
        ("diagnoses", "view"),
    ])
    decision = guard.check(identity("Coordinator"))
    assert decision.status is DecisionStatus.FORBIDDEN
    assert decision.required == ("patients.delete", "diagnoses.view")


def test_all_allows_when_every_requirement_passes():
    guard = authorize_all([("diagnoses", "view"), ("diagnoses", "update")])
    assert guard.check(identity("Therapist")).allowed


def test_all_with_no_requirements_denies():
    assert not authorize_all([]).check(identity("Administrator")).allowed


# ── Construcción ─────────────────────────────────────

def test_requirement_coerce():
    assert Requirement.coerce(("loans", "view")) == Requirement("loans", "view")
    assert Requirement.coerce({"resource": "loans", "action": "view"}).slug == "loans.view"
    assert Requirement(Resource.LOANS, Action.VIEW) == Requirement("loans", "view")
    with pytest.raises(TypeError):
        Requirement.coerce("loans.view")


def test_strict_guard_rejects_unknown_permissions():
    with pytest.raises(PolicyConfigurationError):
        authorize("patients", "archive", strict=True)
    with pytest.raises(PolicyConfigurationError):
        authorize_any([("patients", "view"), ("reports", "view")], strict=True)
    assert authorize("patients", "view", strict=True).check(identity("Therapist")).allowed


def test_guard_is_immutable_and_reusable():
    guard = authorize("appointments", "create")
    with pytest.raises(AttributeError):
        guard.match = GuardMatch.ANY
    assert isinstance(guard, Guard)
    assert guard.check(identity("Therapist")).allowed
    assert not guard.check(identity("Coordinator")).allowed
    assert guard.check(identity("Therapist")).allowed


def test_extract_role():
    assert extract_role(identity("Therapist")) == "Therapist"
    assert extract_role({"role": "Coordinator"}) == "Coordinator"
    assert extract_role(identity(123)) is None


@pytest.mark.parametrize("value", [{"resource": "patients"}, {"action": "view"}, ("patients",), 42])
def test_requirement_coerce_rejects_incomplete_input(value):
    with pytest.raises(TypeError, match="Requisito de permiso inválido"):
        Requirement.coerce(value)
