"""
Identity Models - One table per clinic role.

A person's role is the table their row lives in. There is no shared users
table and no role column; each table owns its own primary key field named
``{role}_id`` and its own role-specific profile columns.
"""
import enum
from sqlalchemy import Column, String, Date, DateTime, func
from ..database import Base


class Role(str, enum.Enum):
    """Clinic roles, one per identity table."""
    PATIENT = "patient"
    DENTIST = "dentist"
    RADIOLOGIST = "radiologist"
    RECEPTIONIST = "receptionist"
    ADMIN = "admin"
    LAB = "lab"


class IdentityMixin:
    """
    Credential and contact columns shared by every role table.

    Fields:
    - password: bcrypt hash; NULL means the account cannot log in with a password
    - name: Display name carried in session tokens
    - email: Secondary unique key and notification address
    - created_at: When the row was created
    """
    password = Column(String, nullable=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Patient(IdentityMixin, Base):
    """Patients, identified as P001, P002, ..."""
    __tablename__ = "patients"

    patient_id = Column(String, primary_key=True, index=True)
    phone_number = Column(String, nullable=True)
    address = Column(String, nullable=True)
    nic = Column(String, unique=True, nullable=True)
    blood_group = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)

    def __repr__(self):
        return f"<Patient(patient_id='{self.patient_id}', email='{self.email}')>"


class Dentist(IdentityMixin, Base):
    """Dentists, identified as knrsdent001, knrsdent002, ..."""
    __tablename__ = "dentists"

    dentist_id = Column(String, primary_key=True, index=True)
    phone_number = Column(String, nullable=True)
    specialization = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)

    def __repr__(self):
        return f"<Dentist(dentist_id='{self.dentist_id}', email='{self.email}')>"


class Radiologist(IdentityMixin, Base):
    """Radiologists, identified as knrsradio001, ..."""
    __tablename__ = "radiologists"

    radiologist_id = Column(String, primary_key=True, index=True)
    phone_number = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)

    def __repr__(self):
        return f"<Radiologist(radiologist_id='{self.radiologist_id}', email='{self.email}')>"


class Receptionist(IdentityMixin, Base):
    """Front-desk staff, identified as knrsrecep001, ..."""
    __tablename__ = "receptionists"

    receptionist_id = Column(String, primary_key=True, index=True)
    phone_number = Column(String, nullable=True)

    def __repr__(self):
        return f"<Receptionist(receptionist_id='{self.receptionist_id}', email='{self.email}')>"


class Admin(IdentityMixin, Base):
    """Clinic administrators. Admin rows are often created with only an id and password."""
    __tablename__ = "admins"

    admin_id = Column(String, primary_key=True, index=True)

    def __repr__(self):
        return f"<Admin(admin_id='{self.admin_id}')>"


class Lab(IdentityMixin, Base):
    """Partner dental labs (service accounts), identified as knrslab001, ..."""
    __tablename__ = "lab"

    lab_id = Column(String, primary_key=True, index=True)
    contact_person = Column(String, nullable=True)
    contact_number = Column(String, nullable=True)
    address = Column(String, nullable=True)

    def __repr__(self):
        return f"<Lab(lab_id='{self.lab_id}', email='{self.email}')>"
