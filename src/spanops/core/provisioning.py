"""Provisioning and teardown of the instance/database pair for one run.

The Provisioner drives a Spanner admin adapter through a small state machine:

    ABSENT -> INSTANCE_CREATING -> INSTANCE_READY -> DATABASE_CREATING
    -> DATABASE_READY -> DATABASE_DROPPING -> INSTANCE_DELETING -> ABSENT

Create calls block on their long-running operation with an explicit deadline
and never retry. Any error while creating moves to FAILED, which still allows
teardown of whatever was (or may have been) created. Teardown is best-effort:
each call is attempted, failures are logged and recorded, never raised.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol, Sequence

from spanops.core.errors import (
    ProvisioningFailure,
    ProvisioningPollError,
    ProvisioningTimeout,
    TeardownFailure,
)
from spanops.core.models import (
    DatabaseRef,
    InstanceRef,
    ProvisioningState,
    TeardownResult,
)

logger = logging.getLogger(__name__)


class AdminOperation(Protocol):
    """Handle for an asynchronous admin operation."""

    def done(self) -> bool:
        """Refresh the operation and return True once it has finished."""
        ...

    def exception(self) -> BaseException | None:
        """Return the error of a finished operation, or None on success."""
        ...


class SpannerAdminAdapter(Protocol):
    """Interface for the instance/database admin calls used by the core."""

    def create_instance(self, instance: InstanceRef) -> AdminOperation:
        """Submit an instance create and return its operation handle."""
        ...

    def create_database(self, database: DatabaseRef) -> AdminOperation:
        """Submit a database create and return its operation handle."""
        ...

    def drop_database(self, instance_id: str, database_name: str) -> None:
        """Drop a database."""
        ...

    def delete_instance(self, instance_id: str) -> None:
        """Delete an instance."""
        ...

    def close(self) -> None:
        """Release the underlying admin connection."""
        ...


def wait_for_operation(
    operation: AdminOperation,
    label: str,
    timeout: float,
    poll_interval: float = 1.0,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Block until an admin operation finishes or the deadline passes.

    Args:
        operation: Operation handle returned by the admin adapter.
        label: Short description used in error messages.
        timeout: Upper bound in seconds for the whole wait.
        poll_interval: Time in seconds between status checks.

    Raises:
        ProvisioningTimeout: If the operation is still running at the deadline.
        ProvisioningPollError: If checking the operation status fails.
        ProvisioningFailure: If the operation reports an error.
    """
    deadline = clock() + timeout

    while True:
        try:
            finished = operation.done()
        except Exception as exc:
            raise ProvisioningPollError(label, str(exc)) from exc
        if finished:
            break

        remaining = deadline - clock()
        if remaining <= 0:
            raise ProvisioningTimeout(label, timeout)
        sleep(min(poll_interval, remaining))

    error = operation.exception()
    if error is not None:
        raise ProvisioningFailure(label, str(error)) from error


class Provisioner:
    """
    Owns the single instance/database pair of a run.

    Attributes:
        adapter: Admin adapter used for all remote calls.
        state: Current ProvisioningState.
        instance: The instance that exists (or may exist) remotely, if any.
        database: The database that exists (or may exist) remotely, if any.
        teardown_results: Results of the last teardown, empty before it runs.
        on_state: Optional callback invoked on every state transition.
    """

    def __init__(
        self,
        adapter: SpannerAdminAdapter,
        *,
        timeout: float = 60.0,
        poll_interval: float = 1.0,
        on_state: Callable[[ProvisioningState], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.adapter = adapter
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.state = ProvisioningState.ABSENT
        self.instance: InstanceRef | None = None
        self.database: DatabaseRef | None = None
        self.teardown_results: list[TeardownResult] = []
        self.on_state = on_state
        self._clock = clock
        self._sleep = sleep
        self._torn_down = False
        self._released = False

    def _set_state(self, state: ProvisioningState) -> None:
        self.state = state
        logger.debug("provisioning state -> %s", state.value)
        if self.on_state is not None:
            self.on_state(state)

    def _await(self, operation: AdminOperation, label: str) -> None:
        wait_for_operation(
            operation,
            label,
            self.timeout,
            self.poll_interval,
            clock=self._clock,
            sleep=self._sleep,
        )

    def create_instance(
        self,
        project: str,
        instance_id: str,
        config_id: str,
        display_name: str,
        capacity_units: int,
    ) -> InstanceRef:
        """
        Create the run's instance and wait for it to become ready.

        Raises:
            ProvisioningFailure: If an instance was already created in this
                run, the submit call fails or the operation reports an error.
            ProvisioningTimeout, ProvisioningPollError: If the operation
                exceeds the timeout or its status cannot be read. The
                instance is then treated as possibly created and will still
                be deleted on teardown.
        """
        label = f"create instance {instance_id}"
        if self.state is not ProvisioningState.ABSENT:
            raise ProvisioningFailure(label, f"provisioner is {self.state.value}")

        ref = InstanceRef(
            project=project,
            instance_id=instance_id,
            config_id=config_id,
            display_name=display_name,
            processing_units=capacity_units,
        )
        self._set_state(ProvisioningState.INSTANCE_CREATING)
        logger.info("Creating instance %s (%s, %d PU)", instance_id, config_id, capacity_units)

        try:
            operation = self.adapter.create_instance(ref)
        except Exception as exc:
            self._set_state(ProvisioningState.FAILED)
            raise ProvisioningFailure(label, str(exc)) from exc

        try:
            self._await(operation, label)
        except (ProvisioningTimeout, ProvisioningPollError):
            self.instance = ref
            self._set_state(ProvisioningState.FAILED)
            raise
        except ProvisioningFailure:
            self._set_state(ProvisioningState.FAILED)
            raise

        self.instance = ref
        self._set_state(ProvisioningState.INSTANCE_READY)
        logger.info("Instance %s ready", instance_id)
        return ref

    def create_database(
        self,
        instance_id: str,
        database_name: str,
        ddl_statements: Sequence[str] = (),
    ) -> DatabaseRef:
        """
        Create a database inside the ready instance and wait for it.

        Never touches the adapter unless ``create_instance`` has succeeded
        for the same instance id.

        Raises:
            ProvisioningFailure: If the instance is not ready, the submit
                call fails or the operation reports an error.
            ProvisioningTimeout, ProvisioningPollError: If the operation
                exceeds the timeout or its status cannot be read. The
                database is then treated as possibly created.
        """
        label = f"create database {database_name}"
        if (
            self.state is not ProvisioningState.INSTANCE_READY
            or self.instance is None
            or self.instance.instance_id != instance_id
        ):
            raise ProvisioningFailure(label, f"instance {instance_id} is not ready")

        ref = DatabaseRef(
            instance_id=instance_id,
            database_name=database_name,
            ddl_statements=tuple(ddl_statements),
        )
        self._set_state(ProvisioningState.DATABASE_CREATING)
        logger.info("Creating database %s on %s", database_name, instance_id)

        try:
            operation = self.adapter.create_database(ref)
        except Exception as exc:
            self._set_state(ProvisioningState.FAILED)
            raise ProvisioningFailure(label, str(exc)) from exc

        try:
            self._await(operation, label)
        except (ProvisioningTimeout, ProvisioningPollError):
            self.database = ref
            self._set_state(ProvisioningState.FAILED)
            raise
        except ProvisioningFailure:
            self._set_state(ProvisioningState.FAILED)
            raise

        self.database = ref
        self._set_state(ProvisioningState.DATABASE_READY)
        logger.info("Database %s ready", database_name)
        return ref

    def drop_database(self, instance_id: str, database_name: str) -> TeardownResult:
        """Drop a database; failures are logged and returned, never raised."""
        resource = f"database {instance_id}/{database_name}"
        self._set_state(ProvisioningState.DATABASE_DROPPING)
        try:
            self.adapter.drop_database(instance_id, database_name)
        except Exception as exc:
            failure = TeardownFailure(resource, exc)
            logger.warning("%s", failure, exc_info=exc)
            return TeardownResult(resource=resource, attempted=True, ok=False, error=str(exc))
        logger.info("Dropped %s", resource)
        return TeardownResult(resource=resource, attempted=True, ok=True)

    def delete_instance(self, instance_id: str) -> TeardownResult:
        """Delete an instance; failures are logged and returned, never raised."""
        resource = f"instance {instance_id}"
        self._set_state(ProvisioningState.INSTANCE_DELETING)
        try:
            self.adapter.delete_instance(instance_id)
        except Exception as exc:
            failure = TeardownFailure(resource, exc)
            logger.warning("%s", failure, exc_info=exc)
            return TeardownResult(resource=resource, attempted=True, ok=False, error=str(exc))
        logger.info("Deleted %s", resource)
        return TeardownResult(resource=resource, attempted=True, ok=True)

    def teardown(self) -> list[TeardownResult]:
        """
        Remove whatever this run created, database first, then instance.

        Both calls are attempted regardless of each other's outcome, and the
        admin connection is released exactly once afterwards. Calling this
        more than once returns the first results without touching the
        adapter again.
        """
        if self._torn_down:
            return self.teardown_results
        self._torn_down = True

        results: list[TeardownResult] = []
        try:
            if self.database is not None:
                results.append(
                    self.drop_database(
                        self.database.instance_id, self.database.database_name
                    )
                )
            else:
                results.append(TeardownResult(resource="database", attempted=False, ok=True))

            if self.instance is not None:
                results.append(self.delete_instance(self.instance.instance_id))
            else:
                results.append(TeardownResult(resource="instance", attempted=False, ok=True))
        finally:
            self.release()
            self.teardown_results = results

        if all(r.ok for r in results):
            self.database = None
            self.instance = None
            self._set_state(ProvisioningState.ABSENT)
        else:
            self._set_state(ProvisioningState.FAILED)
        return results

    def release(self) -> None:
        """
        Close the admin connection once; later calls do nothing.

        Errors from closing are logged, never raised.
        """
        if self._released:
            return
        self._released = True
        try:
            self.adapter.close()
        except Exception as exc:
            logger.warning("Closing admin connection failed: %s", exc, exc_info=exc)
