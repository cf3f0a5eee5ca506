"""Authentication helpers for Cloud Spanner.

This module centralizes creation of a Spanner Client and turns missing
Application Default Credentials into a readable error before any admin call
is made.
"""

from google.auth.exceptions import DefaultCredentialsError
from google.cloud import spanner

from spanops.core.errors import SpanopsError


class AuthError(SpanopsError):
    """Raised when Google Cloud authentication fails."""


def _format_auth_error(message: str, project: str) -> str:
    """Return a user-friendly auth error message."""
    return (
        f"Google Cloud authentication failed for project {project!r}: {message}\n"
        "Authenticate with:\n  $ gcloud auth application-default login"
    )


def get_client(project: str) -> spanner.Client:
    """
    Create and return a Spanner Client bound to a project.

    Credentials are resolved through Application Default Credentials
    (``GOOGLE_APPLICATION_CREDENTIALS``, gcloud user credentials or the
    metadata server).
    """
    try:
        return spanner.Client(project=project)
    except DefaultCredentialsError as exc:
        raise AuthError(_format_auth_error(str(exc), project)) from exc
