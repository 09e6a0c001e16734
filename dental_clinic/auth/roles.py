"""
Role registry and identity resolution.

ROLE_REGISTRY is the single ordered enumeration of clinic roles. Anything
that dispatches on role (login probing, id-prefix detection, token claim
keying, password reset) goes through it instead of listing roles again.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Type

from sqlalchemy.orm import Session

from ..config import settings
from ..password_reset.models import (
    PatientSecurityQuestionAnswer, DentistSecurityQuestionAnswer,
    RadiologistSecurityQuestionAnswer, ReceptionistSecurityQuestionAnswer,
    AdminSecurityQuestionAnswer, LabSecurityQuestionAnswer
)
from .models import Role, Patient, Dentist, Radiologist, Receptionist, Admin, Lab

# Set up logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoleAccessor:
    """
    Store access for one role table.

    Attributes:
        role: The role this table represents
        prefix: Identifier prefix used by ids in this table
        model: SQLAlchemy model for the role table
        answers_model: SQLAlchemy model for the role's security answers
    """
    role: Role
    prefix: str
    model: Type[Any]
    answers_model: Type[Any]

    @property
    def primary_key_field(self) -> str:
        return f"{self.role.value}_id"

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def primary_key(self, record: Any) -> str:
        return getattr(record, self.primary_key_field)

    def find_by_primary_key(self, db: Session, identifier: str) -> Optional[Any]:
        """Return the row whose primary key equals ``identifier``, or None."""
        column = getattr(self.model, self.primary_key_field)
        return db.query(self.model).filter(column == identifier).first()


# Probe order for login. Patients come first when patient login is enabled.
ROLE_REGISTRY: List[RoleAccessor] = [
    RoleAccessor(Role.PATIENT, "P", Patient, PatientSecurityQuestionAnswer),
    RoleAccessor(Role.RADIOLOGIST, "knrsradio", Radiologist, RadiologistSecurityQuestionAnswer),
    RoleAccessor(Role.DENTIST, "knrsdent", Dentist, DentistSecurityQuestionAnswer),
    RoleAccessor(Role.RECEPTIONIST, "knrsrecep", Receptionist, ReceptionistSecurityQuestionAnswer),
    RoleAccessor(Role.ADMIN, "admin", Admin, AdminSecurityQuestionAnswer),
    RoleAccessor(Role.LAB, "knrslab", Lab, LabSecurityQuestionAnswer),
]


class ResolvedIdentity(NamedTuple):
    record: Optional[Any]
    role: Optional[Role]


def accessor_for(role: Role) -> RoleAccessor:
    """Look up the registry entry for a role."""
    for accessor in ROLE_REGISTRY:
        if accessor.role == Role(role):
            return accessor
    raise KeyError(role)


def login_probe_order(include_patients: Optional[bool] = None) -> List[RoleAccessor]:
    """
    Role tables probed during login, in order.

    Args:
        include_patients: Probe the patients table; defaults to the
            PATIENT_LOGIN_ENABLED setting

    Returns:
        Ordered list of registry entries
    """
    if include_patients is None:
        include_patients = settings.patient_login_enabled
    return [
        accessor for accessor in ROLE_REGISTRY
        if include_patients or accessor.role != Role.PATIENT
    ]


def resolve_identity(
    db: Session,
    identifier: str,
    include_patients: Optional[bool] = None
) -> ResolvedIdentity:
    """
    Find which role table owns ``identifier``.

    Tables are probed in login order and the first hit wins; uniqueness of
    ids across tables is not enforced here. Database errors propagate.

    Args:
        db: Database session
        identifier: Login identifier (a role table primary key)
        include_patients: Override for the patient probe

    Returns:
        ResolvedIdentity(record, role), or ResolvedIdentity(None, None)
    """
    for accessor in login_probe_order(include_patients):
        record = accessor.find_by_primary_key(db, identifier)
        if record is not None:
            return ResolvedIdentity(record, accessor.role)

    logger.debug(f"Identifier {identifier!r} not found in any role table")
    return ResolvedIdentity(None, None)


def role_for_identifier(identifier: str) -> Optional[RoleAccessor]:
    """
    Detect a role from an identifier's prefix.

    Args:
        identifier: User id such as ``knrsdent001`` or ``P004``

    Returns:
        The matching registry entry, or None if no prefix matches
    """
    if not identifier:
        return None
    for accessor in ROLE_REGISTRY:
        if identifier.startswith(accessor.prefix):
            return accessor
    return None
