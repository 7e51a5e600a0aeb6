"""Tests for the journal and reminders CLI commands."""

from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from staffcalc.cli.__main__ import cli
from staffcalc.sdk.store import RecordStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def package_id(isolated_env, sample_package):
    return RecordStore().create_package(sample_package).id


class TestJournal:

    def test_add_and_list(self, runner, package_id):
        result = runner.invoke(cli, ["journal", "add", str(package_id), "Countered", "Asked for more housing",
                                     "--type", "response"])
        assert result.exit_code == 0, result.output
        assert "Added journal entry 1" in result.output

        listed = runner.invoke(cli, ["journal", "list", "--package", str(package_id)])
        assert listed.exit_code == 0
        assert "Countered" in listed.output
        assert "response" in listed.output
        assert "Asked for more housing" in listed.output

    def test_add_to_unknown_package(self, runner, isolated_env):
        result = runner.invoke(cli, ["journal", "add", "42", "Title", "Content"])
        assert result.exit_code != 0
        assert "Pay package not found: 42" in result.output

    def test_update_and_delete(self, runner, package_id):
        runner.invoke(cli, ["journal", "add", str(package_id), "Offer", "Sent"])

        updated = runner.invoke(cli, ["journal", "update", "1", "--title", "Offer v2"])
        assert updated.exit_code == 0, updated.output
        assert RecordStore().get_journal_entry(1).title == "Offer v2"

        deleted = runner.invoke(cli, ["journal", "delete", "1"])
        assert deleted.exit_code == 0
        assert runner.invoke(cli, ["journal", "delete", "1"]).exit_code != 0

    def test_list_empty(self, runner, isolated_env):
        result = runner.invoke(cli, ["journal", "list"])
        assert result.exit_code == 0
        assert "No journal entries found." in result.output


class TestReminders:

    def test_add_upcoming_complete(self, runner, package_id):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        result = runner.invoke(cli, ["reminders", "add", str(package_id), "Call back", tomorrow,
                                     "--priority", "high"])
        assert result.exit_code == 0, result.output
        assert "due Tomorrow" in result.output

        upcoming = runner.invoke(cli, ["reminders", "upcoming"])
        assert upcoming.exit_code == 0
        assert "Call back" in upcoming.output
        assert "high" in upcoming.output

        done = runner.invoke(cli, ["reminders", "complete", "1"])
        assert done.exit_code == 0
        assert "Marked reminder 1 complete" in done.output

        after = runner.invoke(cli, ["reminders", "upcoming"])
        assert "No reminders due in the next 7 days." in after.output

        everything = runner.invoke(cli, ["reminders", "list", "--all"])
        assert "[done] Call back" in everything.output

    def test_upcoming_respects_window(self, runner, package_id):
        later = (date.today() + timedelta(days=20)).isoformat()
        runner.invoke(cli, ["reminders", "add", str(package_id), "Renewal", later])

        assert "Renewal" not in runner.invoke(cli, ["reminders", "upcoming"]).output
        assert "Renewal" in runner.invoke(cli, ["reminders", "upcoming", "--days", "30"]).output

    def test_invalid_due_date(self, runner, package_id):
        result = runner.invoke(cli, ["reminders", "add", str(package_id), "Call back", "someday"])
        assert result.exit_code != 0
        assert "Invalid reminder" in result.output

    def test_list_for_package_and_delete(self, runner, package_id):
        runner.invoke(cli, ["reminders", "add", str(package_id), "Call back", "2030-01-02"])

        listed = runner.invoke(cli, ["reminders", "list", "--package", str(package_id)])
        assert "Jan 2, 2030" in listed.output

        assert runner.invoke(cli, ["reminders", "delete", "1"]).exit_code == 0
        missing = runner.invoke(cli, ["reminders", "complete", "1"])
        assert missing.exit_code != 0
        assert "Reminder not found: 1" in missing.output
