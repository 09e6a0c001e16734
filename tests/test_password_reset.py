"""
Tests for password reset by security questions.
"""
from datetime import timedelta

import pytest

from dental_clinic.auth.models import Dentist, Lab
from dental_clinic.core.security import create_reset_token, create_access_token, token_claims
from dental_clinic.password_reset.models import (
    SecurityQuestion, DentistSecurityQuestionAnswer, LabSecurityQuestionAnswer
)


@pytest.fixture
def dentist_with_answers(db, add_identity):
    dentist = add_identity(Dentist, password="old-password", dentist_id="knrsdent001", name="Dr. Smith", email="smith@example.com")
    db.add_all([
        SecurityQuestion(security_question_id=1, question="First pet?"),
        SecurityQuestion(security_question_id=2, question="Home town?"),
        DentistSecurityQuestionAnswer(dentist_id="knrsdent001", security_question_id=1, answer="Rex"),
        DentistSecurityQuestionAnswer(dentist_id="knrsdent001", security_question_id=2, answer="Kinross"),
    ])
    db.commit()
    return dentist


CORRECT_ANSWERS = [
    {"security_question_id": 1, "answer": "Rex"},
    {"security_question_id": 2, "answer": "Kinross"},
]


def _reset_token(client, user_id="knrsdent001", questions=CORRECT_ANSWERS):
    response = client.post("/reset-password", json={"userID": user_id, "questions": questions})
    assert response.status_code == 200
    return response.json()["resetToken"]


def test_list_security_questions(client, dentist_with_answers):
    response = client.get("/security-questions")

    assert response.status_code == 200
    assert [q["question"] for q in response.json()] == ["First pet?", "Home town?"]


def test_get_single_security_question(client, dentist_with_answers):
    assert client.get("/security-questions/2").json() == {"security_question_id": 2, "question": "Home town?"}
    assert client.get("/security-questions/99").status_code == 404


def test_correct_answers_return_reset_token(client, dentist_with_answers):
    response = client.post("/reset-password", json={"userID": "knrsdent001", "questions": CORRECT_ANSWERS})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["resetToken"]


def test_answers_accept_short_field_name(client, dentist_with_answers):
    response = client.post("/reset-password", json={
        "userID": "knrsdent001",
        "questions": [{"question_id": 1, "answer": "Rex"}, {"question_id": 2, "answer": "Kinross"}]
    })

    assert response.status_code == 200


def test_wrong_answer(client, dentist_with_answers):
    response = client.post("/reset-password", json={
        "userID": "knrsdent001",
        "questions": [{"security_question_id": 1, "answer": "Rex"}, {"security_question_id": 2, "answer": "Perth"}]
    })

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Answers do not match."}


def test_empty_answers_never_match(client, dentist_with_answers):
    response = client.post("/reset-password", json={"userID": "knrsdent001", "questions": []})

    assert response.status_code == 401


def test_answers_are_checked_in_the_prefix_role_table(client, db, dentist_with_answers, add_identity):
    add_identity(Lab, lab_id="knrslab001", name="Smile Lab")
    db.add(LabSecurityQuestionAnswer(lab_id="knrslab001", security_question_id=1, answer="Bolt"))
    db.commit()

    response = client.post("/reset-password", json={
        "userID": "knrslab001",
        "questions": [{"security_question_id": 1, "answer": "Rex"}]
    })

    assert response.status_code == 401


def test_unknown_prefix(client):
    response = client.post("/reset-password", json={
        "userID": "zzz001",
        "questions": [{"security_question_id": 1, "answer": "Rex"}]
    })

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid user role."}


def test_change_password_then_login(client, dentist_with_answers, sent_emails):
    token = _reset_token(client)

    response = client.post("/reset-password/change", json={
        "userID": "knrsdent001", "password": "new-password1", "resetToken": token
    })

    assert response.status_code == 200
    assert sent_emails == [("password_changed", "smith@example.com", "Dr. Smith")]

    old = client.post("/auth/login", json={"id": "knrsdent001", "password": "old-password"}).json()
    new = client.post("/auth/login", json={"id": "knrsdent001", "password": "new-password1"}).json()
    assert old["successful"] is False
    assert new["successful"] is True


def test_change_password_without_reset_token(client, dentist_with_answers, sent_emails):
    response = client.post("/reset-password/change", json={"userID": "knrsdent001", "password": "attacker123"})

    assert response.status_code == 401
    assert response.json() == {"error": "Reset token required"}
    assert sent_emails == []
    login = client.post("/auth/login", json={"id": "knrsdent001", "password": "attacker123"}).json()
    assert login["successful"] is False


def test_change_password_with_token_for_another_identity(client, db, dentist_with_answers, add_identity):
    add_identity(Lab, password="lab-password", lab_id="knrslab001", name="Smile Lab")
    db.add(LabSecurityQuestionAnswer(lab_id="knrslab001", security_question_id=1, answer="Bolt"))
    db.commit()
    lab_token = _reset_token(client, "knrslab001", [{"security_question_id": 1, "answer": "Bolt"}])

    response = client.post("/reset-password/change", json={
        "userID": "knrsdent001", "password": "attacker123", "resetToken": lab_token
    })

    assert response.status_code == 403
    login = client.post("/auth/login", json={"id": "knrsdent001", "password": "old-password"}).json()
    assert login["successful"] is True


def test_change_password_with_expired_reset_token(client, dentist_with_answers):
    token = create_reset_token("knrsdent001", expires_delta=timedelta(0))

    response = client.post("/reset-password/change", json={
        "userID": "knrsdent001", "password": "new-password1", "resetToken": token
    })

    assert response.status_code == 403


def test_access_token_cannot_authorise_change(client, dentist_with_answers):
    access_token = create_access_token(token_claims("knrsdent001", "Dr. Smith", "dentist"))

    response = client.post("/reset-password/change", json={
        "userID": "knrsdent001", "password": "new-password1", "resetToken": access_token
    })

    assert response.status_code == 403


def test_change_password_for_missing_identity(client):
    token = create_reset_token("knrsdent999")

    response = client.post("/reset-password/change", json={
        "userID": "knrsdent999", "password": "new-password1", "resetToken": token
    })

    assert response.status_code == 404


def test_change_password_too_short(client, dentist_with_answers):
    response = client.post("/reset-password/change", json={
        "userID": "knrsdent001", "password": "short", "resetToken": _reset_token(client)
    })

    assert response.status_code == 422
