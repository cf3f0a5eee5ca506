"""Commands for running the provisioned CRUD scenario."""

import typer
from rich.markup import escape

from spanops.cli.common.context import build_admin_context
from spanops.cli.common.exits import (
    EXIT_MISMATCH,
    EXIT_PROVISIONING,
    die,
    exit_from_exc,
)
from spanops.cli.common.options import (
    BaseUrlOpt,
    DatabaseOpt,
    InstanceConfigOpt,
    InstanceOpt,
    KeepInstanceOpt,
    PrefixOpt,
    ProcessingUnitsOpt,
    ProjectOpt,
    VerboseOpt,
)
from spanops.cli.common.output import console, out
from spanops.cli.common.progress import state_progress
from spanops.core.adapters.crudservice import HttpCrudServiceAdapter
from spanops.core.config import load_config, resolve_target
from spanops.core.errors import (
    ConfigurationMissing,
    ProvisioningFailure,
    ProvisioningTimeout,
    SpanopsError,
    VerificationMismatch,
)
from spanops.core.lifecycle import cleanup, run_lifecycle
from spanops.core.logs import setup_logging
from spanops.core.naming import DEFAULT_PREFIX, generate_database_name
from spanops.core.provisioning import Provisioner

app = typer.Typer(
    help="Provision a Spanner database and verify a CRUD service against it",
    no_args_is_help=True,
)


@app.command()
def name(prefix: str = typer.Option(DEFAULT_PREFIX, "--prefix", help="Name prefix")):
    """
    Print a fresh, unique database name.
    """
    try:
        typer.echo(generate_database_name(prefix))
    except ValueError as e:
        die(str(e))


@app.command()
def run(
    project: str | None = ProjectOpt,
    instance: str | None = InstanceOpt,
    base_url: str | None = BaseUrlOpt,
    instance_config: str | None = InstanceConfigOpt,
    processing_units: int | None = ProcessingUnitsOpt,
    prefix: str | None = PrefixOpt,
    database: str | None = DatabaseOpt,
    verbose: bool = VerboseOpt,
):
    """
    Create instance and database, run the CRUD steps, then tear everything down.
    """
    setup_logging(verbose, console=console)

    try:
        config = load_config(
            project=project,
            instance_id=instance,
            service_url=base_url,
            instance_config=instance_config,
            processing_units=processing_units,
            database_prefix=prefix,
            database_name=database,
            require_service_url=True,
        )
    except ConfigurationMissing as e:
        die(str(e))

    out.header("Run configuration")
    out.kv(
        {
            "project": config.project,
            "instance": f"{config.instance_id} ({config.instance_config}, "
            f"{config.processing_units} PU)",
            "database": config.database_name,
            "service": config.service_url,
        }
    )

    appctx = build_admin_context(config.project)
    provisioner = Provisioner(
        appctx.adapter,
        timeout=config.admin_timeout,
        poll_interval=config.poll_interval,
    )

    report = None
    error: SpanopsError | None = None
    try:
        crud = HttpCrudServiceAdapter.from_url(config.service_url, config.http_timeout)
        with state_progress() as on_state:
            provisioner.on_state = on_state
            try:
                report = run_lifecycle(config, provisioner, crud)
            except (VerificationMismatch, ProvisioningTimeout, ProvisioningFailure) as e:
                error = e
            finally:
                crud.close()
    finally:
        provisioner.release()

    if error is not None:
        out.teardown_table(provisioner.teardown_results)
        if isinstance(error, VerificationMismatch):
            out.steps_table(error.results)
            exit_from_exc(error, message=escape(str(error)), code=EXIT_MISMATCH)
        exit_from_exc(error, message=escape(str(error)), code=EXIT_PROVISIONING)

    out.steps_table(report.steps)
    out.teardown_table(report.teardown)
    if not report.teardown_ok:
        out.warn("Some resources could not be removed; see the teardown table")
    out.success(f"All {len(report.steps)} CRUD steps passed")


@app.command()
def teardown(
    project: str | None = ProjectOpt,
    instance: str | None = InstanceOpt,
    database: str | None = DatabaseOpt,
    keep_instance: bool = KeepInstanceOpt,
    verbose: bool = VerboseOpt,
):
    """
    Remove a database and/or instance left behind by an interrupted run.
    """
    setup_logging(verbose, console=console)

    try:
        resolved_project, resolved_instance = resolve_target(
            project=project, instance_id=instance
        )
    except ConfigurationMissing as e:
        die(str(e))

    if keep_instance and not database:
        die("Nothing to do: --keep-instance needs --database")

    appctx = build_admin_context(resolved_project)
    with out.status("Tearing down..."):
        results = cleanup(
            Provisioner(appctx.adapter),
            resolved_instance,
            database,
            keep_instance=keep_instance,
        )

    out.teardown_table(results)
    if not all(r.ok for r in results):
        out.warn("Teardown incomplete")
        raise typer.Exit(1)
    out.success("Teardown complete")
