import asyncio

import pytest
from docker.errors import DockerException, NotFound
from fastapi.testclient import TestClient

from hostdash.config import Settings
from hostdash.main import app
from hostdash.services import container_control
from hostdash.services.docker_runtime import get_runtime
from hostdash.services.errors import ContainerRuntimeError, UnauthorizedError

client = TestClient(app)


class RecordingRuntime:
    """Stands in for the Docker engine and records restart calls."""

    def __init__(self, known=("web",), error=None):
        self.known = set(known)
        self.error = error
        self.restarted = []

    def restart(self, name):
        self.restarted.append(name)
        if self.error is not None:
            raise self.error
        if name not in self.known:
            raise NotFound(
                f"404 Client Error: Not Found (\"No such container: {name}\")",
                explanation=f"No such container: {name}",
            )


@pytest.fixture
def runtime(monkeypatch):
    fake = RecordingRuntime()
    monkeypatch.setattr(container_control, "get_settings", lambda: Settings(restart_token="s3cret"))
    app.dependency_overrides[get_runtime] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_runtime, None)


def test_restart_with_correct_token(runtime):
    response = client.post("/api/container/web/restart", json={"token": "s3cret"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Container web restarted"}
    assert runtime.restarted == ["web"]


def test_restart_with_wrong_token_is_rejected_without_runtime_call(runtime):
    response = client.post("/api/container/web/restart", json={"token": "guess"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert runtime.restarted == []


def test_restart_without_body_is_rejected(runtime):
    response = client.post("/api/container/web/restart")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert runtime.restarted == []


def test_restart_with_non_string_token_is_unauthorized(runtime):
    response = client.post("/api/container/web/restart", json={"token": 999})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert runtime.restarted == []


def test_restart_with_malformed_body_is_unauthorized(runtime):
    response = client.post(
        "/api/container/web/restart",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert runtime.restarted == []


def test_restart_unknown_container_returns_runtime_message(runtime):
    response = client.post("/api/container/ghost/restart", json={"token": "s3cret"})

    assert response.status_code == 500
    assert "No such container: ghost" in response.json()["error"]
    assert runtime.restarted == ["ghost"]


def test_restart_when_engine_is_down(runtime):
    runtime.error = DockerException("Error while fetching server API version")

    response = client.post("/api/container/web/restart", json={"token": "s3cret"})

    assert response.status_code == 500
    assert response.json() == {"error": "Error while fetching server API version"}


def test_unset_secret_rejects_every_token(monkeypatch):
    fake = RecordingRuntime()
    monkeypatch.setattr(container_control, "get_settings", lambda: Settings(restart_token=None))

    with pytest.raises(UnauthorizedError):
        asyncio.run(container_control.restart_container("web", None, fake))
    with pytest.raises(UnauthorizedError):
        asyncio.run(container_control.restart_container("web", "", fake))
    assert fake.restarted == []


def test_service_raises_runtime_error_with_engine_message(monkeypatch):
    fake = RecordingRuntime(known=())
    monkeypatch.setattr(container_control, "get_settings", lambda: Settings(restart_token="s3cret"))

    with pytest.raises(ContainerRuntimeError, match="No such container: db"):
        asyncio.run(container_control.restart_container("db", "s3cret", fake))


def test_is_authorized():
    assert container_control.is_authorized("abc", "abc") is True
    assert container_control.is_authorized("abd", "abc") is False
    assert container_control.is_authorized(None, "abc") is False
    assert container_control.is_authorized("abc", None) is False
    assert container_control.is_authorized(123, "123") is False
    assert container_control.is_authorized(["abc"], "abc") is False
