"""Profile CLI commands for Staff Calc.

Manages the agency profile (profile.yaml) - branding and delivery backends.
"""

import click
import yaml

from staffcalc.sdk import (
    ConfigNotFoundError,
    get_agency_profile,
    get_notification_settings,
    get_profile_path,
    load_profile,
    set_profile_value,
)

AGENCY_KEYS = ("name", "address", "phone", "email")


@click.group()
def profile():
    """Manage the agency profile (profile.yaml).

    The profile holds:
    - agency: name, address, phone, email shown in provider messages
    - notifications: email (smtp/outbox) and sms (outbox/none) backends
    """
    pass


@profile.command("show")
def profile_show():
    """Show the profile location, effective agency details, and backends."""
    profile_path = get_profile_path(require_exists=False)
    click.echo(f"Profile: {profile_path}")
    click.echo(f"Exists: {profile_path.exists()}")

    try:
        agency = get_agency_profile()
        notifications = get_notification_settings()
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))

    click.echo()
    click.echo("Agency:")
    for key in AGENCY_KEYS:
        click.echo(f"  {key}: {getattr(agency, key)}")

    click.echo()
    click.echo("Notifications:")
    email = notifications.email
    if email.backend == "smtp":
        click.echo(f"  email: smtp {email.host}:{email.port} (tls={email.use_tls})")
    else:
        click.echo("  email: outbox")
    click.echo(f"  sms: {notifications.sms.backend}")

    if profile_path.exists():
        raw = load_profile()
        # Never print stored credentials
        email_section = (raw.get("notifications") or {}).get("email") or {}
        if email_section.get("password"):
            email_section["password"] = "********"
        click.echo()
        click.echo("---")
        click.echo(yaml.dump(raw, default_flow_style=False, sort_keys=False))


@profile.command("agency")
@click.option("--name", help="Agency name.")
@click.option("--address", help="Mailing address.")
@click.option("--phone", help="Contact phone number.")
@click.option("--email", help="Contact email address.")
def profile_agency(name, address, phone, email):
    """Show or set the agency details used in emails and texts.

    Examples:
        staff-calc profile agency
        staff-calc profile agency --name "Northwind Staffing" --phone "(555) 010-2000"
    """
    values = {"name": name, "address": address, "phone": phone, "email": email}
    changes = {key: value for key, value in values.items() if value is not None}

    for key, value in changes.items():
        profile_file = set_profile_value(f"agency.{key}", value)
        click.echo(f"Set agency.{key} = {value}")
    if changes:
        click.echo(f"Saved to: {profile_file}")
        click.echo()

    try:
        agency = get_agency_profile()
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))
    for key in AGENCY_KEYS:
        click.echo(f"{key}: {getattr(agency, key)}")
