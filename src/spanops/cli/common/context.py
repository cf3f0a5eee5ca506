"""Application context management for the CLI."""

from dataclasses import dataclass

from google.cloud import spanner

from spanops.cli.common.exits import die
from spanops.core.adapters.spanneradmin import SpannerAdminAdapter
from spanops.core.auth import AuthError, get_client


@dataclass
class AdminAppContext:
    """Application context holding the Spanner client and admin adapter."""

    project: str
    client: spanner.Client
    adapter: SpannerAdminAdapter


def build_admin_context(project: str) -> AdminAppContext:
    """Build the admin context, exiting with a setup error if auth fails."""
    try:
        client = get_client(project)
    except AuthError as exc:
        die(str(exc))
    adapter = SpannerAdminAdapter(client)
    return AdminAppContext(project=project, client=client, adapter=adapter)
