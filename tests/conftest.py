import base64

import cv2
import mongomock
import numpy as np
import pytest

from app import create_app
from config import TestConfig
from models import User
from utils.db import mongo


def make_photo(width=64, height=48, color=(120, 90, 60)):
    frame = np.full((height, width, 3), color, dtype=np.uint8)
    ok, buffer = cv2.imencode(".jpg", frame)
    assert ok
    return "data:image/jpeg;base64," + base64.b64encode(buffer.tobytes()).decode("ascii")


class FakeAIClient:
    """Stands in for GenAIClient: returns canned outputs keyed by output schema."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def respond(self, output_schema, value):
        self.responses[output_schema] = value

    def generate(self, prompt_parts, output_schema, flow_name=None):
        self.calls.append((flow_name, prompt_parts))
        value = self.responses.get(output_schema)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise AssertionError(f"no canned response for {output_schema.__name__}")
        return value


@pytest.fixture
def app():
    app = create_app(TestConfig)
    db_client = mongomock.MongoClient()
    mongo.cx = db_client
    mongo.db = db_client["AttendX_test"]
    app.extensions["genai_client"] = FakeAIClient()
    with app.app_context():
        yield app


@pytest.fixture
def ai(app):
    return app.extensions["genai_client"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def photo():
    return make_photo()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role="student", first_name="Ada", last_name="Lovelace", face_template=None,
              password="secret1"):
        counter["n"] += 1
        email = f"{first_name.lower()}.{counter['n']}@example.edu"
        result = User(first_name, last_name, email, password, role=role,
                      face_template=face_template).save()
        return User.find_by_id(result.inserted_id)

    return _make


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess["user_id"] = str(user["_id"])
            sess["user_name"] = User.full_name(user)
            sess["user_role"] = user["role"]
        return client

    return _login
