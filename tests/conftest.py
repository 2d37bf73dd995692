"""
Общие фикстуры: переменные окружения выставляются до импорта приложения,
база - SQLite в памяти, общая для всех соединений через StaticPool.
"""

import os
import tempfile

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="elearning-uploads-")
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, username, role="user", password="Passw0rd!"):
    response = client.post(
        "/api/v1/auth/register",
        json={
            "email": f"{username}@mail.com",
            "username": username,
            "password": password,
            "role": role,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client, username, password="Passw0rd!"):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": f"{username}@mail.com", "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def create_course(client, headers, name="Python 101", price="10"):
    response = client.post(
        "/api/v1/courses",
        data={"name": name, "description": "Intro course", "price": price},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def admin(client):
    user = register(client, "admin", role="admin")
    return {"user": user, "headers": auth_header(login(client, "admin"))}


@pytest.fixture
def student(client):
    user = register(client, "student")
    return {"user": user, "headers": auth_header(login(client, "student"))}


@pytest.fixture
def course(client, admin):
    return create_course(client, admin["headers"])
