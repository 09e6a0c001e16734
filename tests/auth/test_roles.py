"""
Tests for the role registry and identity resolver.
"""
import pytest
from sqlalchemy.exc import OperationalError

from dental_clinic.config import settings
from dental_clinic.auth.models import Role, Patient, Dentist, Radiologist, Receptionist, Admin, Lab
from dental_clinic.auth.roles import (
    ROLE_REGISTRY, RoleAccessor, accessor_for, login_probe_order,
    resolve_identity, role_for_identifier
)


def test_registry_covers_every_role_once():
    roles = [accessor.role for accessor in ROLE_REGISTRY]
    assert sorted(roles) == sorted(Role)
    assert len(set(roles)) == len(roles)


def test_primary_key_field_matches_model():
    for accessor in ROLE_REGISTRY:
        assert accessor.primary_key_field == f"{accessor.role.value}_id"
        assert hasattr(accessor.model, accessor.primary_key_field)
        assert hasattr(accessor.answers_model, accessor.primary_key_field)


def test_default_probe_order_skips_patients():
    order = [accessor.role for accessor in login_probe_order()]
    assert order == [Role.RADIOLOGIST, Role.DENTIST, Role.RECEPTIONIST, Role.ADMIN, Role.LAB]


def test_probe_order_with_patients_enabled():
    order = [accessor.role for accessor in login_probe_order(include_patients=True)]
    assert order[0] == Role.PATIENT
    assert len(order) == len(ROLE_REGISTRY)


@pytest.mark.parametrize("model,identifier,role", [
    (Dentist, "knrsdent001", Role.DENTIST),
    (Radiologist, "knrsradio001", Role.RADIOLOGIST),
    (Receptionist, "knrsrecep001", Role.RECEPTIONIST),
    (Admin, "admin001", Role.ADMIN),
    (Lab, "knrslab001", Role.LAB),
])
def test_resolves_each_staff_table(db, add_identity, model, identifier, role):
    add_identity(model, **{f"{role.value}_id": identifier, "name": "Someone"})

    record, resolved_role = resolve_identity(db, identifier)

    assert resolved_role == role
    assert getattr(record, f"{role.value}_id") == identifier


def test_unknown_identifier_resolves_to_nothing(db):
    assert resolve_identity(db, "nope") == (None, None)


def test_patients_not_resolved_by_default(db, add_identity):
    add_identity(Patient, patient_id="P001", name="Pat")
    assert resolve_identity(db, "P001") == (None, None)


def test_patients_resolved_when_enabled(db, add_identity, monkeypatch):
    add_identity(Patient, patient_id="P001", name="Pat")
    monkeypatch.setattr(settings, "patient_login_enabled", True)

    record, role = resolve_identity(db, "P001")

    assert role == Role.PATIENT
    assert record.patient_id == "P001"


def test_first_table_in_probe_order_wins(db, add_identity):
    add_identity(Dentist, dentist_id="shared01", name="Dentist", email="d@example.com")
    add_identity(Radiologist, radiologist_id="shared01", name="Radiologist", email="r@example.com")

    record, role = resolve_identity(db, "shared01")

    assert role == Role.RADIOLOGIST
    assert record.name == "Radiologist"


def test_store_errors_propagate(db, monkeypatch):
    def broken(self, db, identifier):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(RoleAccessor, "find_by_primary_key", broken)

    with pytest.raises(OperationalError):
        resolve_identity(db, "knrsdent001")


@pytest.mark.parametrize("identifier,role", [
    ("P004", Role.PATIENT),
    ("knrsdent001", Role.DENTIST),
    ("knrsradio002", Role.RADIOLOGIST),
    ("knrsrecep003", Role.RECEPTIONIST),
    ("admin1", Role.ADMIN),
    ("knrslab010", Role.LAB),
])
def test_role_for_identifier(identifier, role):
    assert role_for_identifier(identifier).role == role


def test_role_for_identifier_unknown_prefix():
    assert role_for_identifier("zzz001") is None
    assert role_for_identifier("") is None


def test_accessor_for_accepts_role_value():
    assert accessor_for("lab").model is Lab
    assert accessor_for(Role.DENTIST).table_name == "dentists"
