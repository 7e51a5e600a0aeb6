"""Tests for the MCP tool functions."""

import asyncio

import pytest

pytest.importorskip("mcp")

from staffcalc.mcp import server  # noqa: E402
from staffcalc.sdk.store import RecordStore  # noqa: E402


def run(coro):
    return asyncio.run(coro)


class TestCalculateTool:

    def test_calculates_without_saving(self, isolated_env, sample_package):
        result = run(server.calculate_pay_package(package=sample_package, save=False))
        assert "error" not in result
        assert result["package"]["weekly_gross"] == pytest.approx(2900)
        assert result["margin_percentage"] == "-19.5%"
        assert result["withholding"]["total"] == pytest.approx(399.685)
        assert RecordStore().list_packages() == []

    def test_save_validates(self, isolated_env):
        result = run(server.calculate_pay_package(package={"hoursPerWeek": 36}, save=True))
        assert "missing required field" in result["error"]
        assert result["package"] is None

    def test_save_stores(self, isolated_env, sample_package):
        result = run(server.calculate_pay_package(package=sample_package, save=True))
        assert result["package"]["id"] == 1
        assert RecordStore().get_package(1) is not None


def test_resolve_contract_weeks_tool():
    assert run(server.resolve_contract_weeks(start_date="2023-06-15", end_date="2023-09-10"))["contract_weeks"] == 13
    assert run(server.resolve_contract_weeks(start_date=None, end_date=None))["contract_weeks"] == 13


class TestStoredPackageTools:

    def test_list_and_get(self, isolated_env, sample_package):
        store = RecordStore()
        package = store.create_package(sample_package)
        store.create_journal_entry({"pay_package_id": package.id, "title": "Offer", "content": "Sent"})

        listed = run(server.list_pay_packages(limit=10))
        assert listed["count"] == 1
        assert listed["packages"][0]["provider_name"] == "Sarah Johnson"

        detail = run(server.get_pay_package(package_id=package.id))
        assert detail["package"]["facility"] == "Memorial Hospital"
        assert detail["journal_entries"][0]["title"] == "Offer"
        assert detail["reminders"] == []

    def test_get_unknown(self, isolated_env):
        result = run(server.get_pay_package(package_id=7))
        assert result["error"] == "Pay package not found: 7"

    def test_upcoming_reminders(self, isolated_env):
        result = run(server.list_upcoming_reminders(days=7))
        assert result == {"reminders": [], "count": 0, "days": 7}
