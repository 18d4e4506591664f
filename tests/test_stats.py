import asyncio
from types import SimpleNamespace

import httpx
from docker.errors import DockerException
from fastapi.testclient import TestClient

from hostdash.main import app
from hostdash.models.snapshot import ErrorSnapshot, Snapshot
from hostdash.services import container_monitor, memory_monitor, snapshot
from hostdash.services.base import Sampler
from hostdash.services.container_monitor import ContainerSampler
from hostdash.services.health_monitor import ServiceHealthSampler
from hostdash.services.host_monitor import HostnameSampler
from hostdash.services.memory_monitor import MemorySampler

client = TestClient(app)

GIB = 1024 ** 3


class FakeRuntime:
    def __init__(self, containers=None, error=None):
        self.containers = containers or []
        self.error = error

    def list_containers(self):
        if self.error is not None:
            raise self.error
        return self.containers


class StaticSampler(Sampler):
    def __init__(self, field, value):
        self.field = field
        self.value = value

    async def collect(self):
        return self.value


class FailingSampler(Sampler):
    def __init__(self, field):
        self.field = field

    async def collect(self):
        raise OSError(f"{self.field} source unavailable")


async def _docker_cli_unavailable(args, timeout=5.0):
    raise RuntimeError("docker binary not found on host system")


def _running(name, ports=None):
    return {
        "Id": name,
        "Names": [f"/{name}"],
        "State": "running",
        "Status": "Up 4 hours",
        "Ports": ports or [],
    }


def _health_ok(request):
    return httpx.Response(200, text="OK")


def _patch_host(monkeypatch):
    monkeypatch.setattr(
        memory_monitor.psutil,
        "virtual_memory",
        lambda: SimpleNamespace(total=16 * GIB, available=4 * GIB),
    )
    monkeypatch.setattr(container_monitor, "run_command", _docker_cli_unavailable)


def _samplers(runtime):
    return [
        MemorySampler(),
        ContainerSampler(runtime),
        ServiceHealthSampler(
            urls=["http://coolify:8000/api/health"],
            transport=httpx.MockTransport(_health_ok),
        ),
        StaticSampler("hostname", "docker-host"),
        StaticSampler("load_average", "0.42"),
    ]


def test_stats_end_to_end_with_two_running_containers(monkeypatch):
    _patch_host(monkeypatch)
    runtime = FakeRuntime(
        [
            _running("coolify", ports=[{"PrivatePort": 8080, "PublicPort": 8000}]),
            _running("coolify-db"),
            {**_running("migrate"), "State": "exited", "Status": "Exited (0) 1 hour ago"},
        ]
    )
    monkeypatch.setattr(snapshot, "build_samplers", lambda settings: _samplers(runtime))

    response = client.get("/api/stats")
    assert response.status_code == 200

    data = response.json()
    assert data["serviceHealth"] == "healthy"
    assert data["containers"]["count"] == 2
    assert data["containers"]["list"] == [
        {"name": "coolify", "status": "Up 4 hours", "ports": "8000:8080"},
        {"name": "coolify-db", "status": "Up 4 hours", "ports": "no ports"},
    ]
    assert data["memory"] == {
        "used": 12 * GIB,
        "total": 16 * GIB,
        "available": 4 * GIB,
        "percent": 75.0,
    }
    assert data["hostname"] == "docker-host"
    assert data["loadAverage"] == "0.42"
    assert "timestamp" in data
    assert "error" not in data


def test_container_failure_leaves_other_fields_intact(monkeypatch):
    _patch_host(monkeypatch)
    runtime = FakeRuntime(error=DockerException("Docker engine not running"))
    monkeypatch.setattr(snapshot, "build_samplers", lambda settings: _samplers(runtime))

    response = client.get("/api/stats")
    assert response.status_code == 200

    data = response.json()
    assert data["containers"] == {"count": 0, "list": []}
    assert data["memory"]["percent"] == 75.0
    assert data["serviceHealth"] == "healthy"
    assert data["hostname"] == "docker-host"


def test_failed_samplers_omit_their_fields():
    result = asyncio.run(
        snapshot.collect_snapshot(
            [
                StaticSampler("hostname", "docker-host"),
                FailingSampler("uptime"),
                FailingSampler("cpu"),
                FailingSampler("service_health"),
            ]
        )
    )

    assert isinstance(result, Snapshot)
    payload = result.to_payload()
    assert payload["hostname"] == "docker-host"
    assert "uptime" not in payload
    assert "cpu" not in payload
    assert payload["serviceHealth"] == "unknown"


def test_aggregation_failure_becomes_error_snapshot(monkeypatch):
    def broken_build_samplers(settings):
        raise RuntimeError("sampler registry corrupted")

    monkeypatch.setattr(snapshot, "build_samplers", broken_build_samplers)

    response = client.get("/api/stats")
    assert response.status_code == 200

    data = response.json()
    assert set(data) == {"error", "timestamp"}
    assert data["error"] == "sampler registry corrupted"


def test_invalid_sampler_value_is_a_systemic_failure():
    # a value that violates the snapshot model escapes the samplers' handling
    result = asyncio.run(snapshot.collect_snapshot([StaticSampler("cpu", {"usage": 250, "cores": 4})]))

    assert isinstance(result, ErrorSnapshot)
    assert set(result.to_payload()) == {"error", "timestamp"}


def test_samplers_run_concurrently():
    class SlowSampler(Sampler):
        def __init__(self, field):
            self.field = field

        async def collect(self):
            await asyncio.sleep(0.2)
            return self.field

    async def timed():
        loop = asyncio.get_running_loop()
        start = loop.time()
        await snapshot.collect_snapshot([SlowSampler("hostname"), SlowSampler("uptime"), SlowSampler("load_average")])
        return loop.time() - start

    assert asyncio.run(timed()) < 0.5


def test_build_samplers_covers_every_snapshot_field():
    from hostdash.config import Settings

    fields = {sampler.field for sampler in snapshot.build_samplers(Settings())}

    assert fields == {
        "cpu",
        "memory",
        "disk",
        "containers",
        "uptime",
        "load_average",
        "service_health",
        "hostname",
    }
