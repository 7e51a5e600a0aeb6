"""Pay package commands: calculate, store, and send packages."""

import json
from typing import Any, Dict, Optional

import click
import yaml
from pydantic import ValidationError
from rich.console import Console

from staffcalc.sdk import (
    ConfigNotFoundError,
    PackageNotFoundError,
    PackageValidationError,
    RecordStore,
    calculate,
    send_package_email,
    send_package_sms,
)
from staffcalc.sdk.schemas import PayPackageInput, input_fields

from .renderers.package_renderer import render_package, render_package_list

# Input fields exposed as --kebab-case options on calc and packages update
INPUT_OPTIONS = [
    ("provider_name", "Provider full name"),
    ("specialty", "Specialty (nursing, physician, allied, therapy, ...)"),
    ("facility", "Client facility name"),
    ("location", "Facility city/state"),
    ("start_date", "Assignment start date (YYYY-MM-DD)"),
    ("end_date", "Assignment end date (YYYY-MM-DD)"),
    ("hours_per_week", "Scheduled hours per week"),
    ("bill_rate", "Hourly bill rate"),
    ("regular_pay_rate", "Hourly regular pay rate"),
    ("overtime_pay_rate", "Flat weekly overtime amount"),
    ("taxable_stipend", "Weekly taxable stipend"),
    ("non_taxable_stipend", "Weekly non-taxable stipend"),
    ("meals_stipend", "Weekly meals stipend"),
    ("travel_stipend", "Weekly travel stipend"),
    ("employer_taxes", "Employer taxes, percent of taxable pay"),
    ("workers_comp", "Workers' comp, percent of regular pay"),
    ("health_insurance", "Weekly health insurance cost"),
    ("professional_liability", "Weekly professional liability cost"),
    ("housing", "Weekly housing cost"),
    ("travel", "Weekly travel cost"),
    ("bonus", "Weekly bonus cost"),
    ("other_costs", "Other weekly costs"),
    ("notes", "Free text notes"),
]


def package_input_options(func):
    """Attach one string option per pay package input field.

    Values stay strings here; PayPackageInput coerces "$1,250" and "7.65%".
    """
    for name, help_text in reversed(INPUT_OPTIONS):
        flag = "--" + name.replace("_", "-")
        func = click.option(flag, name, default=None, help=help_text)(func)
    return func


def load_package_file(path: Optional[str]) -> Dict[str, Any]:
    """Read package inputs from a YAML or JSON file (JSON is valid YAML)."""
    if not path:
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML/JSON in {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise click.ClickException(f"Package file must contain a mapping, got {type(data).__name__}")
    return data


def collect_inputs(file_path: Optional[str], options: Dict[str, Any]) -> Dict[str, Any]:
    """File values first, then any options given on the command line."""
    data = load_package_file(file_path)
    data.update({key: value for key, value in options.items() if value is not None})
    return data


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _get_package(store: RecordStore, package_id: int):
    package = store.get_package(package_id)
    if package is None:
        raise click.ClickException(f"Pay package not found: {package_id}")
    return package


def _validation_message(e: ValidationError) -> str:
    lines = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err["loc"])
        lines.append(f"  {loc}: {err['msg']}")
    return "Invalid input:\n" + "\n".join(lines)


# =============================================================================
# calc
# =============================================================================

@click.command("calc")
@click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML or JSON file with package inputs (options override it).")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format.")
@click.option("--save", is_flag=True, help="Store the calculated package.")
@package_input_options
def calc(file_path, output_format, save, **options):
    """Calculate a pay package.

    Computes weekly gross, contract total, agency revenue, costs and margin,
    and the estimated weekly take-home pay. Missing numbers count as 0 and
    missing or invalid dates fall back to a 13-week contract.

    \b
    Examples:
      staff-calc calc --hours-per-week 36 --bill-rate 85 --regular-pay-rate 65 \\
          --taxable-stipend 200 --non-taxable-stipend 250
      staff-calc calc -f package.yaml --format json
      staff-calc calc -f package.yaml --save
    """
    data = collect_inputs(file_path, options)
    fields = input_fields(data)
    ignored = sorted(key for key in data if not input_fields({key: None}))
    if ignored:
        click.echo(f"Ignoring non-input keys: {', '.join(ignored)}", err=True)
    try:
        package = PayPackageInput.model_validate(fields)
    except ValidationError as e:
        raise click.ClickException(_validation_message(e))

    if save:
        try:
            result = RecordStore().create_package(package)
        except PackageValidationError as e:
            raise click.ClickException(
                "Cannot save package:\n" + "\n".join(f"  - {err}" for err in e.errors)
            )
    else:
        result = calculate(package)

    if output_format == "json":
        _echo_json(result.model_dump(mode="json"))
    else:
        render_package(Console(), result)
        if save:
            click.echo(f"Saved pay package {result.id}")


# =============================================================================
# packages
# =============================================================================

@click.group()
def packages():
    """Manage stored pay packages.

    \b
    Examples:
      staff-calc packages list
      staff-calc packages show 3
      staff-calc packages update 3 --bill-rate 90
      staff-calc packages email 3 nurse@example.com
      staff-calc packages log 3
    """
    pass


@packages.command("list")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format.")
def packages_list(output_format):
    """List all stored packages, newest first."""
    items = RecordStore().list_packages()
    if output_format == "json":
        _echo_json([p.model_dump(mode="json") for p in items])
        return
    if not items:
        click.echo("No pay packages stored.")
        return
    render_package_list(Console(), items, title=f"Pay Packages ({len(items)})")


@packages.command("recent")
@click.option("--limit", "-n", type=int, default=5, show_default=True, help="Number of packages.")
def packages_recent(limit):
    """Show the most recently created packages."""
    items = RecordStore().recent_packages(limit)
    if not items:
        click.echo("No pay packages stored.")
        return
    render_package_list(Console(), items, title="Recent Pay Packages")


@packages.command("show")
@click.argument("package_id", type=int)
@click.option("--format", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format.")
def packages_show(package_id, output_format):
    """Show one stored package with its full breakdown."""
    package = _get_package(RecordStore(), package_id)
    if output_format == "json":
        _echo_json(package.model_dump(mode="json"))
    else:
        render_package(Console(), package)


@packages.command("update")
@click.argument("package_id", type=int)
@click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML or JSON file with the fields to change.")
@package_input_options
def packages_update(package_id, file_path, **options):
    """Edit a stored package and recalculate it.

    Only the given fields change; every derived figure is recomputed.
    """
    changes = collect_inputs(file_path, options)
    if not changes:
        raise click.ClickException("Nothing to update. Pass field options or --file.")

    store = RecordStore()
    try:
        updated = store.update_package(package_id, changes)
    except PackageValidationError as e:
        raise click.ClickException(
            "Cannot update package:\n" + "\n".join(f"  - {err}" for err in e.errors)
        )
    if updated is None:
        raise click.ClickException(f"Pay package not found: {package_id}")

    click.echo(f"Updated pay package {updated.id}")
    click.echo(f"  Weekly gross:  {updated.weekly_gross:,.2f}")
    click.echo(f"  Weekly margin: {updated.weekly_agency_margin:,.2f}")
    click.echo(f"  Weekly net:    {updated.weekly_net_pay:,.2f}")


@packages.command("delete")
@click.argument("package_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation.")
def packages_delete(package_id, yes):
    """Delete a package with its journal entries, reminders, and logs."""
    store = RecordStore()
    package = _get_package(store, package_id)
    if not yes:
        click.confirm(
            f"Delete pay package {package_id} ({package.provider_name} at {package.facility})?",
            abort=True,
        )
    store.delete_package(package_id)
    click.echo(f"Deleted pay package {package_id}")


def _report_delivery(channel: str, result) -> None:
    if not result.ok:
        raise click.ClickException(f"Failed to send {channel}: {result.error}")
    click.echo(f"Sent {channel} to {result.log.recipient} ({result.message_id})")


@packages.command("email")
@click.argument("package_id", type=int)
@click.argument("recipient")
@click.option("--include-agency", is_flag=True, help="Include agency revenue, costs, and margin.")
def packages_email(package_id, recipient, include_agency):
    """Email a package summary to a provider.

    Uses the email backend from profile.yaml (notifications.email).
    """
    try:
        result = send_package_email(RecordStore(), package_id, recipient, include_agency=include_agency)
    except (ValueError, PackageNotFoundError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))
    _report_delivery("email", result)


@packages.command("sms")
@click.argument("package_id", type=int)
@click.argument("phone_number")
@click.option("--include-agency", is_flag=True, help="Include agency revenue, costs, and margin.")
def packages_sms(package_id, phone_number, include_agency):
    """Text a package summary to a provider.

    Uses the SMS backend from profile.yaml (notifications.sms).
    """
    try:
        result = send_package_sms(RecordStore(), package_id, phone_number, include_agency=include_agency)
    except (ValueError, PackageNotFoundError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))
    _report_delivery("sms", result)


@packages.command("log")
@click.argument("package_id", type=int)
def packages_log(package_id):
    """Show email/SMS delivery attempts for a package."""
    store = RecordStore()
    _get_package(store, package_id)
    logs = store.list_communication_logs(package_id)
    if not logs:
        click.echo(f"No messages sent for pay package {package_id}.")
        return

    click.echo(f"{'ID':<6} {'Sent':<20} {'Type':<6} {'Status':<8} Recipient")
    click.echo("-" * 70)
    for log in logs:
        click.echo(
            f"{log.id:<6} {log.sent_at:%Y-%m-%d %H:%M:%S}  {log.type:<6} {log.status:<8} {log.recipient}"
        )
        if log.error_message:
            click.echo(f"{'':<6} ! {log.error_message}")
