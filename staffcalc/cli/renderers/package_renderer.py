"""Rich renderer for calculated pay packages.

Transforms SDK models into formatted Rich tables.
"""

from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from staffcalc.sdk.calculator import (
    contract_net_pay,
    cost_breakdown,
    hourly_rate,
    margin_percentage,
    regular_pay,
    withholding_breakdown,
)
from staffcalc.sdk.formatting import format_currency, format_date, format_number
from staffcalc.sdk.schemas import PayPackageResult, StoredPayPackage


def render_package(console: Console, result: PayPackageResult) -> None:
    """Render a calculated package as summary panel plus breakdown tables.

    Args:
        console: Rich Console instance
        result: Output of calculate() or a stored package
    """
    _render_summary(console, result)
    _render_pay_table(console, result)
    _render_agency_table(console, result)
    _render_paycheck_table(console, result)

    if result.notes:
        console.print(Panel(result.notes, title="Notes", border_style="dim"))


def _render_summary(console: Console, result: PayPackageResult) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    if isinstance(result, StoredPayPackage):
        table.add_row("Package", f"#{result.id} (created {result.created_at:%Y-%m-%d %H:%M})")
    table.add_row("Provider", result.provider_name or "[dim]Not specified[/dim]")
    table.add_row("Specialty", result.specialty.capitalize() if result.specialty else "[dim]Not specified[/dim]")
    table.add_row("Facility", result.facility or "[dim]Not specified[/dim]")
    table.add_row("Location", result.location or "[dim]Not specified[/dim]")
    table.add_row(
        "Period",
        f"{format_date(result.start_date)} - {format_date(result.end_date)} ({result.contract_weeks} weeks)",
    )
    table.add_row("Hours Per Week", format_number(result.hours_per_week))
    if isinstance(result, StoredPayPackage):
        sent = [label for label, flag in (("email", result.email_sent), ("sms", result.sms_sent)) if flag]
        table.add_row("Sent", ", ".join(sent) if sent else "[dim]not sent[/dim]")

    console.print(Panel(table, title="Candidate Summary", border_style="dim"))


def _render_pay_table(console: Console, result: PayPackageResult) -> None:
    table = Table(title="Weekly Pay Breakdown", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Weekly", justify="right", min_width=12)
    table.add_column("Hourly", justify="right", min_width=10)

    hours = result.hours_per_week
    rows = [
        ("  Regular Pay", regular_pay(result)),
        ("  Overtime Pay", result.overtime_pay_rate),
        ("  Taxable Stipend", result.taxable_stipend),
        ("  Non-Taxable Stipend", result.non_taxable_stipend),
        ("  Meals Stipend", result.meals_stipend),
        ("  Travel Stipend", result.travel_stipend),
    ]
    for label, amount in rows:
        table.add_row(label, format_currency(amount), format_currency(hourly_rate(amount, hours)))

    table.add_row("", "", "")
    table.add_row(
        "[bold]WEEKLY GROSS[/bold]",
        f"[bold]{format_currency(result.weekly_gross)}[/bold]",
        format_currency(hourly_rate(result.weekly_gross, hours)),
    )
    table.add_row(
        f"Contract Total ({result.contract_weeks} wk)",
        format_currency(result.contract_total),
        "",
        style="dim",
    )

    console.print(table)


def _render_agency_table(console: Console, result: PayPackageResult) -> None:
    costs = cost_breakdown(result)

    table = Table(title="Agency Economics", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Weekly", justify="right", min_width=12)

    table.add_row("[bold]REVENUE[/bold]", format_currency(result.weekly_agency_revenue))
    table.add_row(f"  Bill Rate x {format_number(result.hours_per_week)} hrs", f"{format_currency(result.bill_rate)}/hr")
    table.add_row(f"  Contract Revenue ({result.contract_weeks} wk)", format_currency(result.total_agency_revenue))
    table.add_row("", "")

    table.add_row("[bold]COSTS[/bold]", "")
    table.add_row("  Weekly Gross", format_currency(costs.weekly_gross))
    table.add_row(f"  Employer Taxes ({format_number(result.employer_taxes)}%)", format_currency(costs.employer_taxes))
    table.add_row(f"  Workers' Comp ({format_number(result.workers_comp)}%)", format_currency(costs.workers_comp))
    table.add_row("  Health Insurance", format_currency(costs.health_insurance))
    table.add_row("  Professional Liability", format_currency(costs.professional_liability))
    table.add_row("  Housing, Travel, Bonus, Other", format_currency(costs.additional_costs))
    table.add_row("  [dim]Total Costs[/dim]", f"[dim]{format_currency(result.weekly_agency_costs)}[/dim]")
    table.add_row("", "")

    color = "green" if result.weekly_agency_margin >= 0 else "red"
    table.add_row(
        f"[bold {color}]MARGIN ({margin_percentage(result)})[/bold {color}]",
        f"[bold {color}]{format_currency(result.weekly_agency_margin)}[/bold {color}]",
    )

    console.print(table)


def _render_paycheck_table(console: Console, result: PayPackageResult) -> None:
    withholding = withholding_breakdown(result)

    table = Table(title="Estimated Paycheck", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Weekly", justify="right", min_width=12)

    table.add_row("Taxable Wages", format_currency(withholding.taxable_pay), style="dim")
    table.add_row("  Federal Income Tax (12%)", format_currency(withholding.federal))
    table.add_row("  Social Security (6.2%)", format_currency(withholding.social_security))
    table.add_row("  Medicare (1.45%)", format_currency(withholding.medicare))
    table.add_row("  State Tax (4%)", format_currency(withholding.state))
    table.add_row("  [dim]Total Taxes[/dim]", f"[dim]{format_currency(withholding.total)}[/dim]")
    table.add_row("", "")
    net_color = "green" if result.weekly_net_pay >= 0 else "red"
    table.add_row(
        f"[bold {net_color}]NET PAY[/bold {net_color}]",
        f"[bold {net_color}]{format_currency(result.weekly_net_pay)}[/bold {net_color}]",
    )
    table.add_row(f"Contract Net ({result.contract_weeks} wk)", format_currency(contract_net_pay(result)), style="dim")

    console.print(table)


def render_package_list(console: Console, packages: List[StoredPayPackage], title: Optional[str] = None) -> None:
    """Render stored packages as one table, newest first."""
    table = Table(title=title, box=box.SIMPLE_HEAD)
    table.add_column("ID", justify="right")
    table.add_column("Created")
    table.add_column("Provider")
    table.add_column("Facility")
    table.add_column("Weeks", justify="right")
    table.add_column("Gross/wk", justify="right")
    table.add_column("Margin/wk", justify="right")
    table.add_column("Net/wk", justify="right")

    for pkg in packages:
        margin = format_currency(pkg.weekly_agency_margin)
        if pkg.weekly_agency_margin < 0:
            margin = f"[red]{margin}[/red]"
        table.add_row(
            str(pkg.id),
            f"{pkg.created_at:%Y-%m-%d}",
            pkg.provider_name,
            pkg.facility,
            str(pkg.contract_weeks),
            format_currency(pkg.weekly_gross),
            margin,
            format_currency(pkg.weekly_net_pay),
        )

    console.print(table)
