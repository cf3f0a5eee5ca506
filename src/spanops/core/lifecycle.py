"""Lifecycle runner: provision, verify, tear down.

The run is structured as acquire -> body -> guaranteed release. Teardown runs
on every exit path (verification mismatch, provisioning error, or any other
exception raised mid-script) and never raises itself, so the original error
is what reaches the caller.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from spanops.core.config import RunConfig
from spanops.core.models import DatabaseRef, LifecycleReport, TeardownResult
from spanops.core.provisioning import Provisioner
from spanops.core.verifier import CrudService, CrudVerifier

logger = logging.getLogger(__name__)


@contextmanager
def provisioned_database(
    provisioner: Provisioner, config: RunConfig
) -> Iterator[DatabaseRef]:
    """
    Create the run's instance and database, and always tear them down.

    The instance display name is the instance id. The database starts with
    no DDL statements.
    """
    try:
        provisioner.create_instance(
            config.project,
            config.instance_id,
            config.instance_config,
            config.instance_id,
            config.processing_units,
        )
        database = provisioner.create_database(
            config.instance_id, config.database_name, []
        )
        yield database
    finally:
        results = provisioner.teardown()
        failed = [r for r in results if r.attempted and not r.ok]
        if failed:
            logger.warning(
                "Teardown left %d resource(s) behind: %s",
                len(failed),
                ", ".join(r.resource for r in failed),
            )


def run_lifecycle(
    config: RunConfig,
    provisioner: Provisioner,
    crud_service: CrudService,
) -> LifecycleReport:
    """
    Run one full provisioning and verification cycle.

    Args:
        config: Settings for this run, including the generated database name.
        provisioner: Provisioner bound to an admin adapter. It is torn down
            (and its connection released) before this function returns.
        crud_service: Adapter for the CRUD service under test.

    Returns:
        A LifecycleReport with the step and teardown results.

    Raises:
        ProvisioningTimeout, ProvisioningFailure: If setup fails.
        VerificationMismatch: If a CRUD response does not match.
    """
    logger.info(
        "Starting run on %s/%s (database %s)",
        config.project,
        config.instance_id,
        config.database_name,
    )
    with provisioned_database(provisioner, config) as database:
        steps = CrudVerifier(crud_service).run()

    return LifecycleReport(
        database=database,
        steps=steps,
        teardown=list(provisioner.teardown_results),
    )


def cleanup(
    provisioner: Provisioner,
    instance_id: str,
    database_name: str | None = None,
    *,
    keep_instance: bool = False,
) -> list[TeardownResult]:
    """
    Best-effort removal of resources leaked by an interrupted run.

    Drops ``database_name`` (when given) before deleting the instance, and
    releases the admin connection afterwards.
    """
    results: list[TeardownResult] = []
    try:
        if database_name:
            results.append(provisioner.drop_database(instance_id, database_name))
        if not keep_instance:
            results.append(provisioner.delete_instance(instance_id))
    finally:
        provisioner.release()
    return results
