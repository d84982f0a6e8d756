import io
import os

# Must be set before app modules read settings
os.environ.setdefault("bcrypt_rounds", "4")
os.environ.setdefault("email_queue_enabled", "false")
os.environ.setdefault("jwt_secret_key", "test-secret")

import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect
from PIL import Image

from app.connections.redis import set_redis
from app.models import Task, User
from app.services import auth, users


@pytest.fixture(autouse=True)
def mongo():
    connect("task_manager_test", host="mongodb://localhost", alias="default",
            mongo_client_class=mongomock.MongoClient)
    yield
    User.drop_collection()
    Task.drop_collection()
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def redis_client():
    client = fakeredis.FakeRedis()
    client.flushall()
    set_redis(client)
    yield client
    set_redis(None)


@pytest.fixture
def client():
    from main import app
    return TestClient(app)


@pytest.fixture
def make_user():
    def _make(name="Alice", email="alice@x.com", password="longpass1", **extra):
        return users.register({"name": name, "email": email, "password": password, **extra})
    return _make


@pytest.fixture
def alice(make_user):
    return make_user()


@pytest.fixture
def bob(make_user):
    return make_user(name="Bob", email="bob@y.com", password="anotherpass1")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {auth.issue(user)}"}
    return _headers


@pytest.fixture
def png_bytes():
    def _png(size=(400, 300), fmt="PNG", color="red"):
        buf = io.BytesIO()
        Image.new("RGB", size, color).save(buf, format=fmt)
        return buf.getvalue()
    return _png
