"""Staff Calc MCP Server - FastMCP implementation for pay package tools."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from staffcalc.sdk import (
    RecordStore,
    calculate,
    contract_net_pay,
    margin_percentage,
    resolve_contract_weeks as sdk_resolve_contract_weeks,
    withholding_breakdown,
)
from staffcalc.sdk.schemas import input_fields

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("staff-calc")


def _summary(package) -> dict[str, Any]:
    return {
        "id": package.id,
        "created_at": package.created_at.isoformat(),
        "provider_name": package.provider_name,
        "specialty": package.specialty,
        "facility": package.facility,
        "location": package.location,
        "contract_weeks": package.contract_weeks,
        "weekly_gross": package.weekly_gross,
        "weekly_agency_margin": package.weekly_agency_margin,
        "weekly_net_pay": package.weekly_net_pay,
        "email_sent": package.email_sent,
        "sms_sent": package.sms_sent,
    }


# --- Tools ---

@mcp.tool()
async def calculate_pay_package(
    package: dict[str, Any] = Field(
        description=(
            "Pay package inputs keyed by snake_case or camelCase field name: provider_name, "
            "specialty, facility, location, start_date, end_date (YYYY-MM-DD), hours_per_week, "
            "bill_rate, regular_pay_rate, overtime_pay_rate (flat weekly amount), taxable_stipend, "
            "non_taxable_stipend, meals_stipend, travel_stipend, employer_taxes and workers_comp "
            "(percent), health_insurance, professional_liability, housing, travel, bonus, other_costs. "
            "Missing numbers count as 0."
        ),
    ),
    save: bool = Field(default=False, description="Store the package (requires names, facility, location, and dates)"),
) -> dict[str, Any]:
    """Calculate weekly gross, contract total, agency revenue/costs/margin, and estimated net pay for a pay package."""
    try:
        fields = input_fields(package)
        result = RecordStore().create_package(fields) if save else calculate(fields)
        withholding = withholding_breakdown(result)
        return {
            "package": result.model_dump(mode="json"),
            "margin_percentage": margin_percentage(result),
            "contract_net_pay": contract_net_pay(result),
            "withholding": withholding.to_dict(),
            "saved": save,
        }

    except Exception as e:
        logger.error(f"Error calculating pay package: {e}")
        return {"error": str(e), "package": None}


@mcp.tool()
async def resolve_contract_weeks(
    start_date: str | None = Field(default=None, description="Assignment start date (YYYY-MM-DD)"),
    end_date: str | None = Field(default=None, description="Assignment end date (YYYY-MM-DD)"),
) -> dict[str, Any]:
    """Contract length in whole weeks (rounded up). Missing or invalid dates give the 13-week default."""
    try:
        return {
            "start_date": start_date,
            "end_date": end_date,
            "contract_weeks": sdk_resolve_contract_weeks(start_date, end_date),
        }
    except Exception as e:
        logger.error(f"Error resolving contract weeks: {e}")
        return {"error": str(e), "contract_weeks": None}


@mcp.tool()
async def list_pay_packages(
    limit: int = Field(default=20, description="Maximum number of packages to return (default 20)"),
) -> dict[str, Any]:
    """List stored pay packages, newest first, with headline figures."""
    try:
        packages = RecordStore().list_packages()
        limited = packages[:max(limit, 0)]
        return {
            "packages": [_summary(p) for p in limited],
            "count": len(limited),
            "total_available": len(packages),
        }

    except Exception as e:
        logger.error(f"Error listing pay packages: {e}")
        return {"error": str(e), "packages": [], "count": 0}


@mcp.tool()
async def get_pay_package(
    package_id: int = Field(description="Pay package ID (from list_pay_packages)"),
) -> dict[str, Any]:
    """Get a stored pay package with its journal entries, reminders, and delivery log."""
    try:
        store = RecordStore()
        package = store.get_package(package_id)
        if package is None:
            return {"error": f"Pay package not found: {package_id}", "package": None}

        return {
            "package": package.model_dump(mode="json"),
            "margin_percentage": margin_percentage(package),
            "journal_entries": [e.model_dump(mode="json") for e in store.list_journal_entries(package_id)],
            "reminders": [r.model_dump(mode="json") for r in store.reminders_for_package(package_id)],
            "communication_logs": [
                log.model_dump(mode="json") for log in store.list_communication_logs(package_id)
            ],
        }

    except Exception as e:
        logger.error(f"Error getting pay package {package_id}: {e}")
        return {"error": str(e), "package": None}


@mcp.tool()
async def list_upcoming_reminders(
    days: int = Field(default=7, description="Look-ahead window in days (default 7)"),
) -> dict[str, Any]:
    """List incomplete reminders due between today and today + days, by due date then priority."""
    try:
        reminders = RecordStore().upcoming_reminders(days)
        return {
            "reminders": [r.model_dump(mode="json") for r in reminders],
            "count": len(reminders),
            "days": days,
        }

    except Exception as e:
        logger.error(f"Error listing upcoming reminders: {e}")
        return {"error": str(e), "reminders": [], "count": 0}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
