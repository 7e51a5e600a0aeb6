"""Text rendering of calculated pay packages for email and SMS.

Every function here is a projection of an already-computed PayPackageResult:
derived figures are printed as stored, never recomputed, and negative values
(margin, net pay) are shown as negative currency.
"""

from html import escape
from typing import Any, List, Optional

from .calculator import regular_pay
from .duration import parse_date
from .schemas import AgencyProfile, PayPackageResult


def format_currency(amount: Optional[float]) -> str:
    """Format as US dollars: 1234.5 -> "$1,234.50", -539.23 -> "-$539.23"."""
    if amount is None:
        return "-"
    amount = round(float(amount), 2)
    if amount == 0:
        # Avoid "$-0.00"
        amount = 0.0
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_date(value: Any) -> str:
    """Format as MM/DD/YYYY, or "Not specified" when missing/invalid."""
    parsed = parse_date(value)
    if parsed is None:
        return "Not specified"
    return parsed.strftime("%m/%d/%Y")


def format_number(value: float) -> str:
    """Drop a trailing .0 from whole numbers (36.0 -> "36")."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_period(result: PayPackageResult) -> str:
    """Assignment period with its week count."""
    return (
        f"{format_date(result.start_date)} to {format_date(result.end_date)} "
        f"({result.contract_weeks} weeks)"
    )


def email_subject(result: PayPackageResult) -> str:
    return f"Pay Package for {result.provider_name} at {result.facility}"


def _rows(rows: List[tuple]) -> str:
    lines = []
    for label, value, *style in rows:
        attrs = f' style="{style[0]}"' if style else ""
        lines.append(
            f"          <tr>\n"
            f"            <td>{label}</td>\n"
            f'            <td class="amount"{attrs}>{value}</td>\n'
            f"          </tr>"
        )
    return "\n".join(lines)


EMAIL_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    h1 { color: #0073b6; }
    h2 { color: #4caf50; margin-top: 20px; }
    .footer { margin-top: 30px; padding-top: 10px; border-top: 1px solid #eee; font-size: 12px; color: #777; }
    .highlight { background-color: #f8f9fa; padding: 15px; border-radius: 5px; margin: 15px 0; }
    table { width: 100%; border-collapse: collapse; }
    table td, table th { padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }
    .amount { text-align: right; font-weight: bold; }
"""


def format_for_email(
    result: PayPackageResult,
    agency: Optional[AgencyProfile] = None,
    include_agency: bool = False,
) -> str:
    """Render a pay package as an HTML email body.

    Args:
        result: Calculated (or stored) pay package
        agency: Branding for greeting and footer (defaults if None)
        include_agency: Also show revenue, cost and margin. For internal
            recipients only; providers do not see agency economics.
    """
    agency = agency or AgencyProfile()
    name = escape(result.provider_name)
    hours = format_number(result.hours_per_week)

    assignment = _rows([
        ("Provider:", name),
        ("Specialty:", escape(result.specialty)),
        ("Facility:", escape(result.facility)),
        ("Location:", escape(result.location)),
        ("Assignment Period:", format_period(result)),
        ("Hours Per Week:", hours),
    ])
    weekly = _rows([
        ("Regular Pay Rate:", f"{format_currency(result.regular_pay_rate)}/hr"),
        (f"Regular Pay ({hours} hours):", format_currency(regular_pay(result))),
        ("Overtime Pay:", format_currency(result.overtime_pay_rate)),
        ("Taxable Stipend:", format_currency(result.taxable_stipend)),
        ("Non-Taxable Stipend:", format_currency(result.non_taxable_stipend)),
        ("Meals Stipend:", format_currency(result.meals_stipend)),
        ("Travel Stipend:", format_currency(result.travel_stipend)),
        ("<strong>Total Weekly Gross:</strong>", format_currency(result.weekly_gross), "color: #0073b6;"),
    ])
    take_home = _rows([
        ("Weekly Net Pay (after taxes):", format_currency(result.weekly_net_pay)),
        ("Total Contract Value:", format_currency(result.contract_total), "color: #4caf50;"),
    ])

    sections = [
        f"""    <h1>Healthcare Pay Package Details</h1>

    <p>Hello {name},</p>

    <p>Here are the details of your pay package with {escape(agency.name)}:</p>

    <div class="highlight">
      <h2>Assignment Information</h2>
      <table>
{assignment}
      </table>
    </div>

    <h2>Weekly Pay Breakdown</h2>
    <table>
{weekly}
    </table>

    <h2>Estimated Take-Home Pay</h2>
    <table>
{take_home}
    </table>"""
    ]

    if include_agency:
        margin_style = "color: #c62828;" if result.weekly_agency_margin < 0 else "color: #2e7d32;"
        economics = _rows([
            ("Weekly Agency Revenue:", format_currency(result.weekly_agency_revenue)),
            ("Total Agency Revenue:", format_currency(result.total_agency_revenue)),
            ("Weekly Agency Costs:", format_currency(result.weekly_agency_costs)),
            ("Weekly Agency Margin:", format_currency(result.weekly_agency_margin), margin_style),
        ])
        sections.append(
            f"""    <h2>Agency Economics</h2>
    <table>
{economics}
    </table>"""
        )

    if result.notes:
        sections.append(f"""    <h2>Notes</h2>
    <p>{escape(result.notes)}</p>""")

    sections.append(
        f"""    <p>If you have any questions about this pay package, please contact your {escape(agency.name)} representative.</p>

    <div class="footer">
      <p>&copy; {escape(agency.name)}. All rights reserved.</p>
      <p>{escape(agency.address)} | {escape(agency.phone)} | {escape(agency.email)}</p>
    </div>"""
    )

    body = "\n\n".join(sections)
    return f"""<html>
<head>
  <style>{EMAIL_STYLE}  </style>
</head>
<body>
  <div class="container">
{body}
  </div>
</body>
</html>
"""


def format_for_sms(
    result: PayPackageResult,
    agency: Optional[AgencyProfile] = None,
    include_agency: bool = False,
) -> str:
    """Render a short plain-text pay package summary for SMS."""
    agency = agency or AgencyProfile()

    facility = result.facility
    if result.location:
        facility = f"{facility} ({result.location})"

    lines = [
        f"Pay Package Summary from {agency.name}:",
        f"Provider: {result.provider_name}",
        f"Facility: {facility}",
        f"Period: {format_period(result)}",
        f"Weekly Gross: {format_currency(result.weekly_gross)}",
        f"Est. Weekly Net: {format_currency(result.weekly_net_pay)}",
        f"Contract Total: {format_currency(result.contract_total)}",
    ]
    if include_agency:
        lines.extend([
            f"Weekly Revenue: {format_currency(result.weekly_agency_revenue)}",
            f"Weekly Costs: {format_currency(result.weekly_agency_costs)}",
            f"Weekly Margin: {format_currency(result.weekly_agency_margin)}",
        ])
    if result.notes:
        lines.append(f"Notes: {result.notes}")
    lines.append("")
    lines.append("For complete details, please contact your recruiter.")
    return "\n".join(lines)
