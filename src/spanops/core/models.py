"""Core domain models for a provisioning and verification run.

These models are plain, immutable value objects. They are intentionally free
of Spanner SDK and HTTP client types so the core logic can be exercised with
stub adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class InstanceRef:
    """
    A provisioned Spanner instance.

    Attributes:
        project: Google Cloud project id owning the instance.
        instance_id: Short instance id (not the full resource path).
        config_id: Instance configuration id, e.g. ``regional-us-central1``.
        display_name: Human-readable name shown in the console.
        processing_units: Capacity of the instance (100 = 1/10 node).
    """

    project: str
    instance_id: str
    config_id: str
    display_name: str
    processing_units: int


@dataclass(frozen=True)
class DatabaseRef:
    """A logical database living inside an InstanceRef."""

    instance_id: str
    database_name: str
    ddl_statements: tuple[str, ...] = ()


@dataclass(frozen=True)
class NameRecord:
    """Row exposed by the CRUD service: a generated uuid and a display name."""

    uuid: str
    name: str


class ProvisioningState(str, Enum):
    """
    Lifecycle of the managed instance/database pair.

    FAILED is terminal for creation but still permits teardown of whatever
    was created before the failure.
    """

    ABSENT = "ABSENT"
    INSTANCE_CREATING = "INSTANCE_CREATING"
    INSTANCE_READY = "INSTANCE_READY"
    DATABASE_CREATING = "DATABASE_CREATING"
    DATABASE_READY = "DATABASE_READY"
    DATABASE_DROPPING = "DATABASE_DROPPING"
    INSTANCE_DELETING = "INSTANCE_DELETING"
    FAILED = "FAILED"


@dataclass(frozen=True)
class TeardownResult:
    """Outcome of a single best-effort teardown call."""

    resource: str
    attempted: bool
    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single CRUD verification step."""

    step: int
    method: str
    path: str
    expected: str
    observed: str
    passed: bool


@dataclass(frozen=True)
class LifecycleReport:
    """Everything a finished run produced, for display by frontends."""

    database: DatabaseRef
    steps: list[StepResult] = field(default_factory=list)
    teardown: list[TeardownResult] = field(default_factory=list)

    @property
    def teardown_ok(self) -> bool:
        """Return True if every attempted teardown call succeeded."""
        return all(r.ok for r in self.teardown if r.attempted)
