"""Reminder commands: follow-ups scheduled against pay packages."""

from typing import List

import click
from pydantic import ValidationError

from staffcalc.sdk import PackageNotFoundError, RecordStore, due_label
from staffcalc.sdk.schemas import Reminder


def _echo_reminders(reminders: List[Reminder]) -> None:
    click.echo(f"{'ID':<6} {'Pkg':<6} {'Due':<22} {'Priority':<9} Title")
    click.echo("-" * 70)
    for reminder in reminders:
        status = "[done] " if reminder.is_completed else ""
        click.echo(
            f"{reminder.id:<6} {reminder.pay_package_id:<6} {due_label(reminder):<22} "
            f"{reminder.priority:<9} {status}{reminder.title}"
        )
        if reminder.description:
            click.echo(f"{'':<6} {reminder.description}")


@click.group()
def reminders():
    """Schedule follow-ups on pay packages.

    \b
    Examples:
      staff-calc reminders upcoming
      staff-calc reminders add 3 "Call about counter offer" 2024-06-20 --priority high
      staff-calc reminders complete 7
    """
    pass


@reminders.command("list")
@click.option("--package", "package_id", type=int, help="Only reminders for this package.")
@click.option("--all", "include_completed", is_flag=True, help="Include completed reminders.")
def reminders_list(package_id, include_completed):
    """List reminders by due date and priority."""
    store = RecordStore()
    if package_id is not None:
        items = store.reminders_for_package(package_id)
        if not include_completed:
            items = [r for r in items if not r.is_completed]
    else:
        items = store.list_reminders(include_completed=include_completed)

    if not items:
        click.echo("No reminders found.")
        return
    _echo_reminders(items)


@reminders.command("upcoming")
@click.option("--days", type=int, default=7, show_default=True, help="Look-ahead window in days.")
def reminders_upcoming(days):
    """Show incomplete reminders due in the next DAYS days."""
    items = RecordStore().upcoming_reminders(days)
    if not items:
        click.echo(f"No reminders due in the next {days} days.")
        return
    _echo_reminders(items)


@reminders.command("add")
@click.argument("package_id", type=int)
@click.argument("title")
@click.argument("due_date")
@click.option("--description", help="Longer description.")
@click.option("--priority", type=click.Choice(["low", "medium", "high"]), default="medium",
              show_default=True, help="Priority.")
def reminders_add(package_id, title, due_date, description, priority):
    """Add a reminder due on DUE_DATE (YYYY-MM-DD)."""
    try:
        reminder = RecordStore().create_reminder({
            "pay_package_id": package_id,
            "title": title,
            "description": description,
            "due_date": due_date,
            "priority": priority,
        })
    except PackageNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid reminder: {e}")
    click.echo(f"Added reminder {reminder.id} due {due_label(reminder)}")


@reminders.command("complete")
@click.argument("reminder_id", type=int)
@click.option("--undo", is_flag=True, help="Mark the reminder incomplete again.")
def reminders_complete(reminder_id, undo):
    """Mark a reminder complete."""
    reminder = RecordStore().mark_reminder_complete(reminder_id, is_completed=not undo)
    if reminder is None:
        raise click.ClickException(f"Reminder not found: {reminder_id}")
    state = "incomplete" if undo else "complete"
    click.echo(f"Marked reminder {reminder.id} {state}")


@reminders.command("delete")
@click.argument("reminder_id", type=int)
def reminders_delete(reminder_id):
    """Delete a reminder."""
    if not RecordStore().delete_reminder(reminder_id):
        raise click.ClickException(f"Reminder not found: {reminder_id}")
    click.echo(f"Deleted reminder {reminder_id}")
