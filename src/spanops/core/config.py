"""Run configuration.

A RunConfig is built exactly once at run start and passed explicitly to every
component. Explicit values (usually CLI options) win over environment
variables, which win over the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from spanops.core.errors import ConfigurationMissing
from spanops.core.naming import (
    DEFAULT_PREFIX,
    generate_database_name,
    validate_database_name,
)

PROJECT_ENV = "GOOGLE_CLOUD_PROJECT"
INSTANCE_ENV = "SPANNER_TEST_INSTANCE"
SERVICE_URL_ENV = "SPANOPS_SERVICE_URL"
INSTANCE_CONFIG_ENV = "SPANOPS_INSTANCE_CONFIG"
PROCESSING_UNITS_ENV = "SPANOPS_PROCESSING_UNITS"
DATABASE_PREFIX_ENV = "SPANOPS_DATABASE_PREFIX"
ADMIN_TIMEOUT_ENV = "SPANOPS_ADMIN_TIMEOUT"
HTTP_TIMEOUT_ENV = "SPANOPS_HTTP_TIMEOUT"

DEFAULT_INSTANCE_CONFIG = "regional-us-central1"
DEFAULT_PROCESSING_UNITS = 100
DEFAULT_ADMIN_TIMEOUT_SECONDS = 60.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 240.0
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable settings for one provisioning and verification run.

    Attributes:
        project: Google Cloud project id.
        instance_id: Spanner instance id to create (and delete afterwards).
        database_name: Generated (or pinned) database id for this run.
        service_url: Base URL of the CRUD service under test, if any.
        instance_config: Instance configuration id.
        processing_units: Instance capacity.
        admin_timeout: Bound in seconds for each create operation.
        http_timeout: Response timeout in seconds for each CRUD request.
        poll_interval: Seconds between admin operation status checks.
    """

    project: str
    instance_id: str
    database_name: str
    service_url: str | None = None
    instance_config: str = DEFAULT_INSTANCE_CONFIG
    processing_units: int = DEFAULT_PROCESSING_UNITS
    admin_timeout: float = DEFAULT_ADMIN_TIMEOUT_SECONDS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS


def _pick(explicit: str | None, env: Mapping[str, str], key: str) -> str | None:
    """Return the explicit value, else the stripped env value, else None."""
    if explicit is not None and explicit.strip():
        return explicit.strip()
    raw = env.get(key, "").strip()
    return raw or None


def _require(value: str | None, what: str, env_key: str) -> str:
    if value is None:
        raise ConfigurationMissing(
            f"Please provide the {what} ({env_key} environment variable)."
        )
    return value


def _positive_number(raw: str | None, default, cast, what: str):
    """Parse a positive number, falling back to ``default`` when unset."""
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationMissing(f"{what} must be a number, got {raw!r}.") from exc
    if value <= 0:
        raise ConfigurationMissing(f"{what} must be > 0, got {raw!r}.")
    return value


def resolve_target(
    env: Mapping[str, str] | None = None,
    *,
    project: str | None = None,
    instance_id: str | None = None,
) -> tuple[str, str]:
    """
    Return ``(project, instance_id)`` from explicit values or the environment.

    Raises:
        ConfigurationMissing: If either value is absent.
    """
    env = os.environ if env is None else env
    resolved_project = _require(
        _pick(project, env, PROJECT_ENV), "Google Cloud project id", PROJECT_ENV
    )
    resolved_instance = _require(
        _pick(instance_id, env, INSTANCE_ENV), "Spanner test instance", INSTANCE_ENV
    )
    return resolved_project, resolved_instance


def load_config(
    env: Mapping[str, str] | None = None,
    *,
    project: str | None = None,
    instance_id: str | None = None,
    service_url: str | None = None,
    instance_config: str | None = None,
    processing_units: int | None = None,
    database_prefix: str | None = None,
    database_name: str | None = None,
    require_service_url: bool = False,
) -> RunConfig:
    """
    Build a RunConfig from explicit values and the process environment.

    The database name is generated here (once per run) unless pinned via
    ``database_name``.

    Raises:
        ConfigurationMissing: If the project or instance id is absent, if a
            service URL is required but absent, or if a value is invalid.
    """
    env = os.environ if env is None else env
    resolved_project, resolved_instance = resolve_target(
        env, project=project, instance_id=instance_id
    )

    resolved_url = _pick(service_url, env, SERVICE_URL_ENV)
    if require_service_url:
        resolved_url = _require(
            resolved_url, "CRUD service base URL", SERVICE_URL_ENV
        )
    if resolved_url:
        resolved_url = resolved_url.rstrip("/")

    units_raw = (
        str(processing_units)
        if processing_units is not None
        else _pick(None, env, PROCESSING_UNITS_ENV)
    )
    units = _positive_number(units_raw, DEFAULT_PROCESSING_UNITS, int, "Processing units")

    admin_timeout = _positive_number(
        _pick(None, env, ADMIN_TIMEOUT_ENV),
        DEFAULT_ADMIN_TIMEOUT_SECONDS,
        float,
        "Admin timeout",
    )
    http_timeout = _positive_number(
        _pick(None, env, HTTP_TIMEOUT_ENV),
        DEFAULT_HTTP_TIMEOUT_SECONDS,
        float,
        "HTTP timeout",
    )

    try:
        if database_name:
            name = validate_database_name(database_name.strip())
        else:
            prefix = (
                database_prefix
                if database_prefix is not None
                else env.get(DATABASE_PREFIX_ENV, DEFAULT_PREFIX)
            )
            name = generate_database_name(prefix)
    except ValueError as exc:
        raise ConfigurationMissing(str(exc)) from exc

    return RunConfig(
        project=resolved_project,
        instance_id=resolved_instance,
        database_name=name,
        service_url=resolved_url,
        instance_config=_pick(instance_config, env, INSTANCE_CONFIG_ENV)
        or DEFAULT_INSTANCE_CONFIG,
        processing_units=units,
        admin_timeout=admin_timeout,
        http_timeout=http_timeout,
    )
