"""Journal commands: notes recorded against a pay package."""

import click
from pydantic import ValidationError

from staffcalc.sdk import PackageNotFoundError, RecordStore

ENTRY_TYPES = ["note", "response", "followup", "call", "email", "other"]


@click.group()
def journal():
    """Record notes, provider responses, and calls on a pay package.

    \b
    Examples:
      staff-calc journal list --package 3
      staff-calc journal add 3 "Initial offer" "Sent package, waiting to hear back"
      staff-calc journal add 3 "Countered" "Asked for $200 more housing" --type response
    """
    pass


@journal.command("list")
@click.option("--package", "package_id", type=int, help="Only entries for this package.")
def journal_list(package_id):
    """List journal entries, newest first."""
    entries = RecordStore().list_journal_entries(package_id)
    if not entries:
        click.echo("No journal entries found.")
        return

    click.echo(f"{'ID':<6} {'Pkg':<6} {'Created':<17} {'Type':<10} Title")
    click.echo("-" * 70)
    for entry in entries:
        click.echo(
            f"{entry.id:<6} {entry.pay_package_id:<6} {entry.created_at:%Y-%m-%d %H:%M} "
            f"{entry.entry_type:<10} {entry.title}"
        )
        click.echo(f"{'':<6} {entry.content}")


@journal.command("add")
@click.argument("package_id", type=int)
@click.argument("title")
@click.argument("content")
@click.option("--type", "entry_type", type=click.Choice(ENTRY_TYPES), default="note",
              show_default=True, help="Entry type.")
def journal_add(package_id, title, content, entry_type):
    """Add a journal entry to a package."""
    try:
        entry = RecordStore().create_journal_entry({
            "pay_package_id": package_id,
            "title": title,
            "content": content,
            "entry_type": entry_type,
        })
    except PackageNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Invalid journal entry: {e}")
    click.echo(f"Added journal entry {entry.id} to pay package {package_id}")


@journal.command("update")
@click.argument("entry_id", type=int)
@click.option("--title", help="New title.")
@click.option("--content", help="New content.")
@click.option("--type", "entry_type", type=click.Choice(ENTRY_TYPES), help="New entry type.")
def journal_update(entry_id, title, content, entry_type):
    """Edit a journal entry."""
    changes = {
        key: value
        for key, value in (("title", title), ("content", content), ("entry_type", entry_type))
        if value is not None
    }
    if not changes:
        raise click.ClickException("Nothing to update. Pass --title, --content, or --type.")

    try:
        entry = RecordStore().update_journal_entry(entry_id, changes)
    except ValidationError as e:
        raise click.ClickException(f"Invalid journal entry: {e}")
    if entry is None:
        raise click.ClickException(f"Journal entry not found: {entry_id}")
    click.echo(f"Updated journal entry {entry.id}")


@journal.command("delete")
@click.argument("entry_id", type=int)
def journal_delete(entry_id):
    """Delete a journal entry."""
    if not RecordStore().delete_journal_entry(entry_id):
        raise click.ClickException(f"Journal entry not found: {entry_id}")
    click.echo(f"Deleted journal entry {entry_id}")
