"""
Security question models used for password reset.

Answers follow the same one-table-per-role layout as the identity tables:
each role has its own answers table keyed by ``({role}_id, security_question_id)``.
"""
from sqlalchemy import Column, Integer, String, ForeignKey
from ..database import Base


class SecurityQuestion(Base):
    __tablename__ = "security_questions"

    security_question_id = Column(Integer, primary_key=True, index=True)
    question = Column(String, nullable=False)

    def __repr__(self):
        return f"<SecurityQuestion(id={self.security_question_id})>"


class AnswerMixin:
    """Question reference and stored answer shared by every answers table."""
    answer = Column(String, nullable=False)


class PatientSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "patient_security_question_answers"

    patient_id = Column(String, ForeignKey("patients.patient_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)


class DentistSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "dentist_security_question_answers"

    dentist_id = Column(String, ForeignKey("dentists.dentist_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)


class RadiologistSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "radiologist_security_question_answers"

    radiologist_id = Column(String, ForeignKey("radiologists.radiologist_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)


class ReceptionistSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "receptionist_security_question_answers"

    receptionist_id = Column(String, ForeignKey("receptionists.receptionist_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)


class AdminSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "admin_security_question_answers"

    admin_id = Column(String, ForeignKey("admins.admin_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)


class LabSecurityQuestionAnswer(AnswerMixin, Base):
    __tablename__ = "lab_security_question_answers"

    lab_id = Column(String, ForeignKey("lab.lab_id", ondelete="CASCADE"), primary_key=True)
    security_question_id = Column(Integer, ForeignKey("security_questions.security_question_id"), primary_key=True)
