"""Integration tests for the HTTP surface -- POST /v1/user and /health."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from user_registry.infrastructure.config import DatabaseSettings, LoggingSettings, SecuritySettings, Settings
from user_registry.infrastructure.persistence.models import UserModel
from user_registry.presentation.api.dependencies import get_create_user_use_case
from user_registry.presentation.api.main import create_app
from user_registry.shared.result import Ok

pytestmark = pytest.mark.integration


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(
        env="testing",
        database=DatabaseSettings(url=database_url, pool_pre_ping=False),
        logging=LoggingSettings(level="warning"),
        security=SecuritySettings(bcrypt_rounds=4),
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def _users_with_email(app, client: TestClient, email: str) -> list[UserModel]:
    """Read rows back on the client's event loop."""

    async def fetch() -> list[UserModel]:
        async with app.state.session_factory() as session:
            result = await session.execute(select(UserModel).where(UserModel.email == email))
            return list(result.scalars())

    return client.portal.call(fetch)


class RecordingUseCase:
    """Stands in for CreateUserUseCase and records whether it ran."""

    def __init__(self) -> None:
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        return Ok(str(uuid.uuid4()))


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert "uptime_seconds" in data


class TestCreateUser:
    def test_create_returns_id(self, client, sample_user_data):
        resp = client.post("/v1/user", json=sample_user_data)
        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {"id"}
        assert uuid.UUID(body["id"]).version == 4

    def test_duplicate_email_is_conflict(self, app, client, sample_user_data):
        first = client.post("/v1/user", json=sample_user_data)
        assert first.status_code == 200

        resp = client.post("/v1/user", json={**sample_user_data, "name": "Jane Doe"})

        assert resp.status_code == 409
        error = resp.json()["error"]
        assert error["code"] == "USER.ALREADY_EXISTS"
        assert error["message"] == "User already exists"

        rows = _users_with_email(app, client, sample_user_data["email"])
        assert len(rows) == 1
        assert rows[0].id == first.json()["id"]
        assert rows[0].name == "John Doe"

    @pytest.mark.parametrize("email", ["o'brien@example.com", "josé@example.com"])
    def test_accepts_addresses_the_request_schema_accepts(self, client, email):
        resp = client.post("/v1/user", json={"name": "John Doe", "email": email, "password": "abcd"})
        assert resp.status_code == 200

    def test_long_password_is_accepted(self, client, sample_user_data):
        resp = client.post("/v1/user", json={**sample_user_data, "password": "a" * 80})
        assert resp.status_code == 200

    def test_invalid_body_is_rejected_before_use_case(self, app, client):
        use_case = RecordingUseCase()
        app.dependency_overrides[get_create_user_use_case] = lambda: use_case

        resp = client.post("/v1/user", json={"name": "123", "email": "bad", "password": "x"})

        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {d["field"] for d in error["details"]}
        assert {"body.name", "body.email", "body.password"} <= fields
        assert use_case.commands == []

    def test_missing_body_is_rejected(self, client):
        resp = client.post("/v1/user", json={})
        assert resp.status_code == 400

    def test_command_carries_request_id(self, app, client, sample_user_data):
        use_case = RecordingUseCase()
        app.dependency_overrides[get_create_user_use_case] = lambda: use_case

        resp = client.post("/v1/user", json=sample_user_data, headers={"X-Request-ID": "req-abc"})

        assert resp.status_code == 200
        assert use_case.commands[0].correlation_id == "req-abc"
        assert use_case.commands[0].email == sample_user_data["email"]


class TestRequestId:
    def test_incoming_request_id_is_echoed(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated_when_absent(self, client):
        resp = client.get("/health")
        assert uuid.UUID(resp.headers["X-Request-ID"])

    def test_error_body_carries_request_id(self, client, sample_user_data):
        client.post("/v1/user", json=sample_user_data)
        resp = client.post("/v1/user", json=sample_user_data, headers={"X-Request-ID": "req-dup"})
        assert resp.status_code == 409
        assert resp.json()["error"]["request_id"] == "req-dup"
        assert resp.headers["X-Request-ID"] == "req-dup"


class TestUnhandledErrors:
    def test_500_carries_request_id(self, app):
        class ExplodingUseCase:
            async def execute(self, command):
                raise ConnectionError("database unreachable")

        app.dependency_overrides[get_create_user_use_case] = lambda: ExplodingUseCase()
        with TestClient(app, raise_server_exceptions=False) as client:
            resp = client.post(
                "/v1/user",
                json={"name": "John Doe", "email": "john@gmail.com", "password": "abcd"},
                headers={"X-Request-ID": "req-500"},
            )

        assert resp.status_code == 500
        assert resp.headers["X-Request-ID"] == "req-500"
        error = resp.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert error["request_id"] == "req-500"
