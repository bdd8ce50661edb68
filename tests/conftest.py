import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from config import TestingConfig
from extensions import db
from utils.records import create_operator, seed_default_subjects

OPERATOR_EMAIL = "admin@example.org"
OPERATOR_PASSWORD = "correct-horse"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        seed_default_subjects()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def operator(app):
    return create_operator(OPERATOR_EMAIL, OPERATOR_PASSWORD, "Front Office")


@pytest.fixture
def auth_client(client, operator):
    response = client.post('/auth/login', json={"email": OPERATOR_EMAIL, "password": OPERATOR_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def student_payload():
    return {
        "first_name": "Ana",
        "last_name": "Lopez",
        "id_number": "ST-10001",
        "date_of_birth": "2012-04-09",
        "grade_level": "Grade 6",
        "total_tuition": "500.00",
        "parent_name": "Maria Lopez",
        "parent_id_number": "PA-20001",
        "parent_phone": "5551234567",
        "parent_address": "12 Elm Street",
    }


@pytest.fixture
def make_student(auth_client, student_payload):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = dict(student_payload)
        payload["id_number"] = f"ST-{10000 + counter['n']}"
        payload.update(overrides)
        response = auth_client.post('/students', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()["student"]

    return _make
