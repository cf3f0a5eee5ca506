"""Common CLI options for the CLI."""

import typer

ProjectOpt = typer.Option(
    None,
    "--project",
    help="Google Cloud project id (default: $GOOGLE_CLOUD_PROJECT)",
)

InstanceOpt = typer.Option(
    None,
    "--instance",
    "-i",
    help="Spanner instance id to create and delete (default: $SPANNER_TEST_INSTANCE)",
)

BaseUrlOpt = typer.Option(
    None,
    "--base-url",
    "-u",
    help="Base URL of the CRUD service under test (default: $SPANOPS_SERVICE_URL)",
)

InstanceConfigOpt = typer.Option(
    None,
    "--config",
    help="Instance configuration id (default: regional-us-central1)",
)

ProcessingUnitsOpt = typer.Option(
    None,
    "--processing-units",
    help="Instance capacity in processing units (default: 100)",
)

PrefixOpt = typer.Option(
    None,
    "--prefix",
    help="Prefix for the generated database name (default: r2dbc-)",
)

DatabaseOpt = typer.Option(
    None,
    "--database",
    "-d",
    help="Use this database name instead of generating one",
)

KeepInstanceOpt = typer.Option(
    False,
    "--keep-instance",
    help="Only drop the database, leave the instance in place",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)
