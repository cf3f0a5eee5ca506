"""Error taxonomy for provisioning and verification runs.

Setup and verification errors abort a run and are surfaced to the caller.
Teardown errors are recorded and logged only, so they never hide an earlier,
more informative failure.
"""

from __future__ import annotations

from typing import Any, Sequence


class SpanopsError(RuntimeError):
    """Base class for all spanops errors."""


class ConfigurationMissing(SpanopsError):
    """Raised when a required environment variable or option is absent."""


class ProvisioningTimeout(SpanopsError):
    """Raised when an admin operation does not complete within its bound."""

    def __init__(self, label: str, timeout: float) -> None:
        super().__init__(f"{label} did not complete within {timeout:g}s")
        self.label = label
        self.timeout = timeout


class ProvisioningFailure(SpanopsError):
    """Raised when an admin operation completes with (or submits into) an error."""

    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"{label} failed: {reason}")
        self.label = label
        self.reason = reason


class VerificationMismatch(SpanopsError):
    """
    Raised when a CRUD response does not match its expected value.

    Attributes:
        step: Number of the failing step (1-based).
        expected: Human-readable description of the expected response.
        observed: What was actually received (body or transport error).
        results: Step results gathered before and including the failure.
    """

    def __init__(
        self,
        step: int,
        expected: str,
        observed: str,
        results: Sequence[Any] = (),
    ) -> None:
        super().__init__(
            f"step {step}: expected {expected}, got {observed!r}"
        )
        self.step = step
        self.expected = expected
        self.observed = observed
        self.results = list(results)


class TeardownFailure(SpanopsError):
    """Wraps an error raised while dropping a database or deleting an instance."""

    def __init__(self, resource: str, cause: BaseException) -> None:
        super().__init__(f"teardown of {resource} failed: {cause}")
        self.resource = resource
        self.cause = cause


class ProvisioningPollError(ProvisioningFailure):
    """
    Raised when checking an admin operation fails after it was submitted.

    The remote outcome is unknown, so the resource may exist.
    """
