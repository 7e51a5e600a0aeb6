"""Tests for the JSON record store."""

import json
import threading
from datetime import date

import pytest
from pydantic import ValidationError

from staffcalc.sdk.store import (
    PackageNotFoundError,
    PackageValidationError,
    RecordStore,
    validate_package,
)
from staffcalc.sdk.schemas import PayPackageInput


@pytest.fixture
def store(tmp_path, clock):
    return RecordStore(root=tmp_path / "records", clock=clock)


@pytest.fixture
def package(store, sample_package):
    return store.create_package(sample_package)


class TestValidatePackage:

    def test_complete_package_is_valid(self, sample_package):
        assert validate_package(PayPackageInput.model_validate(sample_package)) == []

    def test_reports_each_missing_field(self):
        errors = validate_package(PayPackageInput(provider_name="Ana Ruiz", start_date="bad"))
        assert "missing required field: specialty" in errors
        assert "missing required field: facility" in errors
        assert "missing required field: location" in errors
        assert "missing or invalid date: start_date" in errors
        assert "missing or invalid date: end_date" in errors
        assert "missing required field: provider_name" not in errors


class TestCreatePackage:

    def test_stores_calculated_package(self, store, package, tmp_path):
        assert package.id == 1
        assert package.weekly_gross == pytest.approx(2900)
        assert package.email_sent is False
        assert package.sms_sent is False

        on_disk = json.loads((tmp_path / "records" / "pay_packages" / "1.json").read_text())
        assert on_disk["provider_name"] == "Sarah Johnson"
        assert on_disk["start_date"] == "2023-06-15"
        assert on_disk["weekly_agency_margin"] == pytest.approx(-598.085)

    def test_ids_increase(self, store, sample_package):
        ids = [store.create_package(sample_package).id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_ids_are_not_reused_after_delete(self, store, sample_package):
        first = store.create_package(sample_package)
        store.delete_package(first.id)
        assert store.create_package(sample_package).id == 2

    def test_rejects_incomplete_package(self, store, sample_package):
        del sample_package["facility"]
        sample_package["endDate"] = "not-a-date"
        with pytest.raises(PackageValidationError) as exc_info:
            store.create_package(sample_package)
        assert "missing required field: facility" in exc_info.value.errors
        assert "missing or invalid date: end_date" in exc_info.value.errors
        assert store.list_packages() == []

    def test_concurrent_creates_get_unique_ids(self, store, sample_package):
        ids = []

        def worker():
            for _ in range(5):
                ids.append(store.create_package(sample_package).id)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(ids) == list(range(1, 21))


class TestReadPackages:

    def test_get_unknown_returns_none(self, store):
        assert store.get_package(99) is None

    def test_list_newest_first(self, store, sample_package):
        for name in ("First", "Second", "Third"):
            store.create_package({**sample_package, "providerName": name})
        assert [p.provider_name for p in store.list_packages()] == ["Third", "Second", "First"]

    def test_recent_limits(self, store, sample_package):
        for _ in range(7):
            store.create_package(sample_package)
        recent = store.recent_packages()
        assert [p.id for p in recent] == [7, 6, 5, 4, 3]
        assert len(store.recent_packages(2)) == 2

    def test_unreadable_files_are_skipped(self, store, package, tmp_path):
        (tmp_path / "records" / "pay_packages" / "broken.json").write_text("{not json")
        assert [p.id for p in store.list_packages()] == [package.id]


class TestUpdatePackage:

    def test_partial_edit_recalculates(self, store, package):
        updated = store.update_package(package.id, {"billRate": 120})
        assert updated.bill_rate == 120
        assert updated.weekly_agency_revenue == pytest.approx(4320)
        assert updated.weekly_agency_margin == pytest.approx(4320 - 3658.085)
        assert updated.provider_name == "Sarah Johnson"
        assert store.get_package(package.id).bill_rate == 120

    def test_keeps_identity(self, store, package):
        updated = store.update_package(package.id, {"id": 50, "createdAt": "2001-01-01T00:00:00", "notes": "Updated"})
        assert updated.id == package.id
        assert updated.created_at == package.created_at
        assert updated.notes == "Updated"

    def test_derived_fields_in_changes_are_ignored(self, store, package):
        updated = store.update_package(package.id, {"weeklyGross": 1})
        assert updated.weekly_gross == pytest.approx(2900)

    def test_date_change_changes_contract_weeks(self, store, package):
        updated = store.update_package(package.id, {"end_date": "2023-12-14"})
        assert updated.contract_weeks == 26
        assert updated.contract_total == pytest.approx(2900 * 26)

    def test_sets_sent_flags(self, store, package):
        updated = store.update_package(package.id, {"emailSent": True})
        assert updated.email_sent is True
        assert updated.sms_sent is False
        assert store.update_package(package.id, {"sms_sent": True}).email_sent is True

    def test_unknown_returns_none(self, store):
        assert store.update_package(42, {"billRate": 100}) is None

    def test_invalid_edit_raises_and_keeps_record(self, store, package):
        with pytest.raises(PackageValidationError):
            store.update_package(package.id, {"provider_name": ""})
        assert store.get_package(package.id).provider_name == "Sarah Johnson"


class TestDeletePackage:

    def test_delete_cascades(self, store, package, sample_package):
        other = store.create_package(sample_package)
        store.create_journal_entry({"pay_package_id": package.id, "title": "Offer", "content": "Sent"})
        store.create_journal_entry({"pay_package_id": other.id, "title": "Offer", "content": "Sent"})
        store.create_reminder({"pay_package_id": package.id, "title": "Call", "due_date": "2024-06-03"})
        store.create_communication_log({
            "pay_package_id": package.id, "type": "email", "recipient": "a@b.com", "status": "success",
        })

        assert store.delete_package(package.id) is True

        assert store.get_package(package.id) is None
        assert [e.pay_package_id for e in store.list_journal_entries()] == [other.id]
        assert store.list_reminders(include_completed=True) == []
        assert store.list_communication_logs(package.id) == []

    def test_delete_unknown_returns_false(self, store):
        assert store.delete_package(7) is False


class TestJournalEntries:

    def test_create_and_list(self, store, package):
        first = store.create_journal_entry({"pay_package_id": package.id, "title": "Offer", "content": "Sent offer"})
        second = store.create_journal_entry({
            "payPackageId": package.id, "title": "Reply", "content": "Wants more housing", "entryType": "response",
        })
        assert first.entry_type == "note"
        assert second.entry_type == "response"
        assert [e.id for e in store.list_journal_entries(package.id)] == [second.id, first.id]
        assert store.list_journal_entries(package.id + 1) == []

    def test_unknown_package_raises(self, store):
        with pytest.raises(PackageNotFoundError):
            store.create_journal_entry({"pay_package_id": 9, "title": "Offer", "content": "Sent"})

    def test_malformed_entry_raises(self, store, package):
        with pytest.raises(ValidationError):
            store.create_journal_entry({"pay_package_id": package.id, "title": "", "content": "Sent"})

    def test_update_bumps_updated_at(self, store, package):
        entry = store.create_journal_entry({"pay_package_id": package.id, "title": "Offer", "content": "Sent"})
        updated = store.update_journal_entry(entry.id, {"content": "Sent twice", "pay_package_id": 999})
        assert updated.content == "Sent twice"
        assert updated.pay_package_id == package.id
        assert updated.created_at == entry.created_at
        assert updated.updated_at > entry.updated_at

    def test_update_and_delete_unknown(self, store):
        assert store.update_journal_entry(3, {"title": "x"}) is None
        assert store.delete_journal_entry(3) is False


class TestReminders:

    @pytest.fixture
    def reminders(self, store, package):
        specs = [
            ("Overdue call", "2024-05-30", "high"),
            ("Due today", "2024-06-01", "low"),
            ("Due today urgent", "2024-06-01", "high"),
            ("In a week", "2024-06-08", "medium"),
            ("Next month", "2024-07-01", "medium"),
        ]
        return [
            store.create_reminder({"pay_package_id": package.id, "title": t, "due_date": d, "priority": p})
            for t, d, p in specs
        ]

    def test_list_orders_by_due_then_priority(self, store, reminders):
        titles = [r.title for r in store.list_reminders()]
        assert titles == ["Overdue call", "Due today urgent", "Due today", "In a week", "Next month"]

    def test_upcoming_window(self, store, reminders):
        upcoming = store.upcoming_reminders(7, today=date(2024, 6, 1))
        assert [r.title for r in upcoming] == ["Due today urgent", "Due today", "In a week"]

    def test_completed_reminders_drop_out(self, store, reminders):
        done = store.mark_reminder_complete(reminders[1].id)
        assert done.is_completed is True
        assert "Due today" not in [r.title for r in store.upcoming_reminders(7, today=date(2024, 6, 1))]
        assert "Due today" not in [r.title for r in store.list_reminders()]
        assert "Due today" in [r.title for r in store.list_reminders(include_completed=True)]

    def test_reopen(self, store, reminders):
        store.mark_reminder_complete(reminders[0].id)
        reopened = store.mark_reminder_complete(reminders[0].id, is_completed=False)
        assert reopened.is_completed is False

    def test_for_package_includes_completed_last(self, store, package, reminders):
        store.mark_reminder_complete(reminders[0].id)
        listed = store.reminders_for_package(package.id)
        assert len(listed) == 5
        assert listed[-1].id == reminders[0].id

    def test_unknown_package_raises(self, store):
        with pytest.raises(PackageNotFoundError):
            store.create_reminder({"pay_package_id": 5, "title": "Call", "due_date": "2024-06-03"})

    def test_update_and_delete(self, store, reminders):
        updated = store.update_reminder(reminders[4].id, {"dueDate": "2024-06-02", "priority": "high"})
        assert updated.due_date == date(2024, 6, 2)
        assert store.delete_reminder(reminders[4].id) is True
        assert store.get_reminder(reminders[4].id) is None
        assert store.mark_reminder_complete(reminders[4].id) is None


class TestCommunicationLogs:

    def test_newest_first_per_package(self, store, package):
        first = store.create_communication_log({
            "pay_package_id": package.id, "type": "email", "recipient": "a@b.com", "status": "success",
        })
        second = store.create_communication_log({
            "payPackageId": package.id, "type": "sms", "recipient": "+15550100",
            "status": "failed", "errorMessage": "SMS service not configured properly",
        })
        logs = store.list_communication_logs(package.id)
        assert [log.id for log in logs] == [second.id, first.id]
        assert logs[0].error_message == "SMS service not configured properly"
        assert store.list_communication_logs(package.id + 1) == []
