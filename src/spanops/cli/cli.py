"""CLI application for Spanner CRUD end-to-end checks."""

import typer

from spanops.cli.commands.lifecycle import app as e2e_app

app = typer.Typer(
    help="spanops-cli - Spanner provisioning and CRUD verification",
    no_args_is_help=True,
)

app.add_typer(e2e_app, name="e2e", help="Provision / verify / tear down.")


if __name__ == "__main__":
    app()
