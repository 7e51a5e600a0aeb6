"""Staff Calc CLI - Command-line interface for healthcare pay packages."""

import click

from staffcalc import __version__

from .journal_commands import journal as journal_group
from .package_commands import calc as calc_command
from .package_commands import packages as packages_group
from .profile_commands import profile as profile_group
from .reminders_commands import reminders as reminders_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="staff-calc")
def cli():
    """Staff Calc - Healthcare staffing pay package calculator.

    Calculate weekly pay, agency margin, and estimated take-home pay for
    travel assignments, keep the packages with notes and follow-up
    reminders, and send summaries to providers.

    Configuration is loaded from (in order):

    \b
    1. STAFF_CALC_CONFIG_PATH environment variable
    2. ~/.config/staff-calc/ (XDG default)

    Run 'staff-calc profile show' to see agency details and delivery backends.
    """
    pass


cli.add_command(calc_command)
cli.add_command(packages_group)
cli.add_command(journal_group)
cli.add_command(reminders_group)
cli.add_command(settings_group)
cli.add_command(profile_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
