"""CRUD verification script run against the service under test.

The script is a fixed, strictly ordered sequence of requests; step 5 consumes
the uuid captured in step 4. The first mismatching response aborts the script
with VerificationMismatch. Requests are never retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import NoReturn, Protocol

from spanops.core.errors import VerificationMismatch
from spanops.core.models import NameRecord, StepResult

logger = logging.getLogger(__name__)

TABLE_CREATED = "table NAMES created successfully"
ROW_INSERTED = "row inserted successfully"
ROW_DELETED = "row deleted successfully"
ROW_MISSING = "row did not exist"
TABLE_DROPPED = "table NAMES dropped successfully"

INSERTED_NAME = "Bob"
MISSING_UUID = "nonexistent"


@dataclass(frozen=True)
class CrudResponse:
    """Status code and raw body of a CRUD service response."""

    status_code: int
    text: str


class CrudService(Protocol):
    """Interface for sending requests to the CRUD service."""

    def request(self, method: str, path: str, body: str | None = None) -> CrudResponse:
        """Send a request with an optional plain-text body."""
        ...


def parse_name_records(text: str) -> list[NameRecord]:
    """
    Parse a ``/listRows`` body into NameRecords.

    Raises:
        ValueError: If the body is not a JSON array of objects with string
            ``name`` and ``uuid`` fields.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"not JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ValueError("expected a JSON array")

    records: list[NameRecord] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError("expected an array of objects")
        name = item.get("name")
        uuid = item.get("uuid")
        if not isinstance(name, str) or not isinstance(uuid, str):
            raise ValueError("each row needs string 'name' and 'uuid' fields")
        records.append(NameRecord(uuid=uuid, name=name))
    return records


class CrudVerifier:
    """Runs the fixed create/list/add/delete/drop scenario."""

    def __init__(self, service: CrudService) -> None:
        self.service = service
        self.results: list[StepResult] = []

    def _send(self, step: int, method: str, path: str, body: str | None, expected: str) -> str:
        logger.debug("step %d: %s %s", step, method, path)
        try:
            response = self.service.request(method, path, body)
        except Exception as exc:
            self._fail(step, method, path, expected, f"{type(exc).__name__}: {exc}")
        return response.text

    def _pass(self, step: int, method: str, path: str, expected: str, observed: str) -> None:
        self.results.append(
            StepResult(step, method, path, expected, observed, passed=True)
        )
        logger.info("step %d passed: %s %s", step, method, path)

    def _fail(
        self, step: int, method: str, path: str, expected: str, observed: str
    ) -> NoReturn:
        self.results.append(
            StepResult(step, method, path, expected, observed, passed=False)
        )
        raise VerificationMismatch(step, expected, observed, self.results)

    def expect_literal(
        self,
        step: int,
        method: str,
        path: str,
        expected: str,
        body: str | None = None,
    ) -> None:
        """Send a request and require the body to equal ``expected`` exactly."""
        description = repr(expected)
        text = self._send(step, method, path, body, description)
        if text != expected:
            self._fail(step, method, path, description, text)
        self._pass(step, method, path, description, text)

    def expect_records(self, step: int, path: str, expected_names: list[str]) -> list[NameRecord]:
        """List rows and require exactly ``expected_names``, in order."""
        description = f"rows named {expected_names!r}"
        text = self._send(step, "GET", path, None, description)
        try:
            records = parse_name_records(text)
        except ValueError as exc:
            self._fail(step, "GET", path, description, f"{text} ({exc})")

        if [r.name for r in records] != expected_names or any(not r.uuid for r in records):
            self._fail(step, "GET", path, description, text)
        self._pass(step, "GET", path, description, text)
        return records

    def run(self) -> list[StepResult]:
        """
        Execute all seven steps in order.

        Returns:
            One StepResult per step, all passed.

        Raises:
            VerificationMismatch: On the first response that does not match.
        """
        self.results = []

        self.expect_literal(1, "POST", "/createTable", TABLE_CREATED)
        self.expect_records(2, "/listRows", [])
        self.expect_literal(3, "POST", "/addRow", ROW_INSERTED, body=INSERTED_NAME)
        (bob,) = self.expect_records(4, "/listRows", [INSERTED_NAME])
        self.expect_literal(5, "POST", "/deleteRow", ROW_DELETED, body=bob.uuid)
        self.expect_literal(6, "POST", "/deleteRow", ROW_MISSING, body=MISSING_UUID)
        self.expect_literal(7, "POST", "/dropTable", TABLE_DROPPED)

        return list(self.results)
