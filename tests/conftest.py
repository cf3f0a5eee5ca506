from __future__ import annotations

import sys
import uuid
from pathlib import Path

import httpx
import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


class FakeOperation:
    """Admin operation that finishes after ``polls_needed`` polls."""

    def __init__(self, polls_needed: int = 0, error: BaseException | None = None):
        self.polls_needed = polls_needed
        self.error = error
        self.polls = 0

    def done(self) -> bool:
        self.polls += 1
        return self.polls > self.polls_needed

    def exception(self) -> BaseException | None:
        return self.error


class RecordingAdminAdapter:
    """Admin adapter stub that records every call in order."""

    def __init__(self):
        self.calls: list[str] = []
        self.instance_op = FakeOperation()
        self.database_op = FakeOperation()
        self.raise_on: dict[str, Exception] = {}

    def _record(self, call: str, name: str) -> None:
        self.calls.append(f"{call}:{name}")
        if call in self.raise_on:
            raise self.raise_on[call]

    def create_instance(self, instance):
        self._record("create_instance", instance.instance_id)
        return self.instance_op

    def create_database(self, database):
        self._record("create_database", database.database_name)
        return self.database_op

    def drop_database(self, instance_id: str, database_name: str) -> None:
        self._record("drop_database", database_name)

    def delete_instance(self, instance_id: str) -> None:
        self._record("delete_instance", instance_id)

    def close(self) -> None:
        self._record("close", "-")


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeCrudApp:
    """In-memory NAMES table served through httpx.MockTransport."""

    def __init__(self):
        self.rows: dict[str, str] = {}
        self.requests: list[tuple[str, str, str]] = []
        self.overrides: dict[str, str] = {}
        self.content_types: list[str | None] = []
        self.listed_uuids: list[list[str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = request.content.decode()
        self.requests.append((method, path, body))
        self.content_types.append(request.headers.get("content-type"))

        if path in self.overrides:
            return httpx.Response(200, text=self.overrides[path])

        if (method, path) == ("POST", "/createTable"):
            self.rows = {}
            return httpx.Response(200, text="table NAMES created successfully")
        if (method, path) == ("GET", "/listRows"):
            self.listed_uuids.append(list(self.rows))
            return httpx.Response(
                200, json=[{"name": n, "uuid": u} for u, n in self.rows.items()]
            )
        if (method, path) == ("POST", "/addRow"):
            self.rows[str(uuid.uuid4())] = body
            return httpx.Response(200, text="row inserted successfully")
        if (method, path) == ("POST", "/deleteRow"):
            if self.rows.pop(body, None) is None:
                return httpx.Response(200, text="row did not exist")
            return httpx.Response(200, text="row deleted successfully")
        if (method, path) == ("POST", "/dropTable"):
            self.rows = {}
            return httpx.Response(200, text="table NAMES dropped successfully")
        return httpx.Response(404, text="not found")

    def client(self) -> httpx.Client:
        return httpx.Client(
            base_url="http://crud.test", transport=httpx.MockTransport(self)
        )


@pytest.fixture
def admin_adapter() -> RecordingAdminAdapter:
    return RecordingAdminAdapter()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def crud_app() -> FakeCrudApp:
    return FakeCrudApp()


@pytest.fixture
def crud_service(crud_app):
    from spanops.core.adapters.crudservice import HttpCrudServiceAdapter

    adapter = HttpCrudServiceAdapter(crud_app.client())
    yield adapter
    adapter.close()


@pytest.fixture
def make_operation():
    return FakeOperation
