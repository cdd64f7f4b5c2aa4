#!/usr/bin/env python3
"""
bypass-perm — generate ByPass Custom Permissions for an org's automations.

Usage:
    bypass-perm generate [-u ORG] [-a API_VERSION] [-x MANIFEST] [-d OUTPUT_DIR]
                         [-k VR|Flow|Trigger ...] [-s SOBJECT ...] [--offline]
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from bypass_perm.config import Settings, get_settings
from bypass_perm.models.emission import GenerationReport
from bypass_perm.models.permission import AutomationKind
from bypass_perm.models.pipeline import PipelineConfig
from bypass_perm.orchestrator.pipeline import GenerationError, GenerationPipeline
from bypass_perm.project.sfdx import ProjectError, SfdxProject
from bypass_perm.salesforce.auth import credentials_from_settings, resolve_org_credentials
from bypass_perm.salesforce.client import RetrievalError, SalesforceClient
from bypass_perm.selection.prompts import InteractiveSelector, StaticSelector

console = Console(stderr=True)

STAGE_MESSAGES = {
    "inventory": "Retrieving existing Custom Permissions...",
    "catalog": "Listing sObjects...",
    "select": "Waiting for selection...",
    "gaps": "Identifying missing ByPass permissions...",
    "emit": "Writing Custom Permission files...",
    "manifest": "Writing manifest...",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _connect(settings: Settings, target_org: Optional[str], api_version: str) -> SalesforceClient:
    if target_org:
        credentials = resolve_org_credentials(target_org)
    else:
        credentials = credentials_from_settings(settings)
    return SalesforceClient(
        instance_url=credentials.instance_url,
        access_token=credentials.access_token,
        api_version=api_version,
        request_timeout_seconds=settings.request_timeout_seconds,
        retrieve_timeout_seconds=settings.retrieve_timeout_seconds,
    )


def _print_report(report: GenerationReport) -> None:
    if not report.gaps:
        console.print("[green]All selected ByPass Custom Permissions already exist.[/green]")
        return

    table = Table(title="Generated ByPass Custom Permissions")
    table.add_column("sObject", style="cyan")
    for kind in AutomationKind:
        table.add_column(kind.value, justify="center")
    for sobject, kinds in report.gaps.items():
        table.add_row(sobject, *["✓" if kind in kinds else "" for kind in AutomationKind])
    console.print(table)
    console.print(
        f"[green]Generated {report.permission_count} permission(s) "
        f"in {len(report.written_paths)} file(s).[/green]"
    )
    if report.manifest_path:
        console.print(f"Manifest: {escape(report.manifest_path)}")


@click.group()
def cli():
    """ByPass Custom Permission tooling."""


@cli.command()
@click.option("--apiversion", "-a", help="Override the API version used for org requests")
@click.option("--manifest", "-x", type=click.Path(dir_okay=False, path_type=Path),
              help="Write a package.xml listing the generated permissions")
@click.option("--target-org", "-u", help="Org alias or username (resolved with the sf CLI)")
@click.option("--output-dir", "-d", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Directory for generated files (default: current directory)")
@click.option("--automation", "-k", "automations", multiple=True,
              type=click.Choice([k.value for k in AutomationKind]),
              help="Automation kind; skips the automation prompt when given")
@click.option("--sobject", "-s", "sobjects", multiple=True,
              help="sObject API name; skips the object prompt when given")
@click.option("--offline", is_flag=True, help="Use local source only; no org connection")
@click.option("--project-dir", type=click.Path(file_okay=False, path_type=Path),
              default=Path("."), help="Directory inside the SFDX project")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.option("--json", "as_json", is_flag=True,
              help="Print an empty success result as JSON on stdout instead of the summary")
def generate(apiversion, manifest, target_org, output_dir, automations, sobjects,
             offline, project_dir, verbose, as_json):
    """Create the ByPass Custom Permissions missing for the selected sObjects."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        project = SfdxProject.load(project_dir)
    except ProjectError as e:
        console.print(f"[red]Error: project stage failed: {escape(str(e))}[/red]")
        sys.exit(1)

    package_dirs = project.package_paths if project else [project_dir.resolve()]
    api_version = apiversion or (project and project.source_api_version) or settings.api_version
    config = PipelineConfig(
        output_dir=(output_dir or Path.cwd()).resolve(),
        package_dirs=package_dirs,
        api_version=api_version,
        manifest_path=manifest.resolve() if manifest else None,
        offline=offline,
    )

    if automations and sobjects:
        selector = StaticSelector([AutomationKind(a) for a in automations], list(sobjects))
    elif automations or sobjects:
        console.print("[red]Error: --automation and --sobject must be given together[/red]")
        sys.exit(1)
    else:
        selector = InteractiveSelector()

    org = None
    if not offline:
        try:
            org = _connect(settings, target_org, api_version)
        except RetrievalError as e:
            console.print(f"[red]Error: connect stage failed: {escape(str(e))}[/red]")
            sys.exit(1)

    try:
        with console.status("Starting...") as status:
            def on_stage(stage: str) -> None:
                if stage == "select":
                    status.stop()
                else:
                    status.start()
                    status.update(STAGE_MESSAGES[stage])

            pipeline = GenerationPipeline(config, selector, org=org, on_stage=on_stage)
            report = pipeline.run()
    except GenerationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        for name in e.failed:
            console.print(f"   - {name}")
        sys.exit(1)
    finally:
        if org is not None:
            org.close()

    if as_json:
        click.echo(json.dumps({"status": 0, "result": {}}, indent=2))
    else:
        _print_report(report)


def main():
    cli()


if __name__ == "__main__":
    main()
