"""
Record storage for pay packages, journal entries, reminders, and
communication logs.

This module contains all business logic for records storage and validation.
CLI and MCP tools should be thin wrappers that call these functions.

Layout
------

Records are JSON files under the records directory, one per record::

    records/
      _counters.json               last id issued per collection
      pay_packages/1.json
      journal_entries/1.json
      reminders/1.json
      communication_logs/1.json

Ids are integers issued from _counters.json, so they are unique and
increase monotonically. A process-wide lock serializes id assignment and
every read-modify-write; files are written to a temp file and renamed, so a
reader sees either the old or the new record, never a partial one. Concurrent
updates of one record are last-writer-wins.

Not found vs invalid
--------------------

Lookups and mutations of an unknown id return None (or False for deletes);
they do not raise. Invalid caller input raises: PackageValidationError for
pay packages missing required descriptive fields, pydantic.ValidationError
for malformed journal entries and reminders, and PackageNotFoundError when a
journal entry or reminder names a package that does not exist.

Pay packages are never partially updated: update_package merges the edited
inputs over the stored ones and recalculates every derived figure.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .calculator import PackageLike, calculate
from .config import get_data_path
from .reminders import sort_reminders
from .schemas import (
    CommunicationLog,
    CommunicationLogInput,
    JournalEntry,
    JournalEntryInput,
    PayPackageInput,
    Reminder,
    ReminderInput,
    StoredPayPackage,
    input_fields,
    known_fields,
)

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

PACKAGES = "pay_packages"
JOURNAL_ENTRIES = "journal_entries"
REMINDERS = "reminders"
COMMUNICATION_LOGS = "communication_logs"

COUNTERS_FILENAME = "_counters.json"

# Descriptive fields a stored pay package must carry
REQUIRED_TEXT_FIELDS = ("provider_name", "specialty", "facility", "location")

FLAG_FIELDS = {
    "email_sent": "email_sent",
    "emailSent": "email_sent",
    "sms_sent": "sms_sent",
    "smsSent": "sms_sent",
}

# Shared by every RecordStore in the process
_LOCK = threading.RLock()


# =============================================================================
# VALIDATION
# =============================================================================

class PackageValidationError(Exception):
    """Raised when a pay package fails validation."""
    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


class PackageNotFoundError(Exception):
    """Raised when an operation requires a pay package that does not exist."""
    def __init__(self, package_id: int):
        self.package_id = package_id
        super().__init__(f"Pay package not found: {package_id}")


def validate_package(package: PayPackageInput) -> List[str]:
    """Check that a package is complete enough to store.

    The calculator accepts anything; this is the gate in front of storage.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    for field in REQUIRED_TEXT_FIELDS:
        if not getattr(package, field):
            errors.append(f"missing required field: {field}")
    if package.start_date is None:
        errors.append("missing or invalid date: start_date")
    if package.end_date is None:
        errors.append("missing or invalid date: end_date")
    return errors


def require_valid_package(package: PayPackageInput) -> None:
    """Raise PackageValidationError if validate_package finds problems."""
    errors = validate_package(package)
    if errors:
        raise PackageValidationError(errors)


# =============================================================================
# STORAGE
# =============================================================================

def get_records_dir() -> Path:
    """Get the records base directory.

    Returns:
        Path to records directory (<data_dir>/records/)
    """
    records_dir = get_data_path() / "records"
    records_dir.mkdir(parents=True, exist_ok=True)
    return records_dir


class RecordStore:
    """JSON-file repository for pay packages and their related records.

    Args:
        root: Records directory (defaults to get_records_dir())
        clock: Returns the current time; override in tests
    """

    def __init__(self, root: Optional[Path] = None, clock: Callable[[], datetime] = datetime.now):
        self.root = Path(root) if root is not None else get_records_dir()
        self.root.mkdir(parents=True, exist_ok=True)
        self.clock = clock

    # -------------------------------------------------------------------------
    # File primitives
    # -------------------------------------------------------------------------

    def _dir(self, collection: str) -> Path:
        path = self.root / collection
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _write_json(self, path: Path, payload: Any) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _next_id(self, collection: str) -> int:
        with _LOCK:
            counters_path = self.root / COUNTERS_FILENAME
            counters = {}
            if counters_path.exists():
                with open(counters_path) as f:
                    counters = json.load(f)
            next_id = int(counters.get(collection, 0)) + 1
            counters[collection] = next_id
            self._write_json(counters_path, counters)
            return next_id

    def _save(self, collection: str, record) -> None:
        self._write_json(self._dir(collection) / f"{record.id}.json", record.model_dump(mode="json"))

    def _load(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        path = self._dir(collection) / f"{int(record_id)}.json"
        try:
            with open(path) as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping unreadable record {path}: {e}")
            return None

    def _scan(self, collection: str) -> List[Dict[str, Any]]:
        results = []
        for json_file in self._dir(collection).glob("*.json"):
            if json_file.name.startswith("."):
                continue
            try:
                with open(json_file) as f:
                    results.append(json.load(f))
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Skipping unreadable record {json_file}: {e}")
                continue
        return results

    def _delete(self, collection: str, record_id: int) -> bool:
        path = self._dir(collection) / f"{int(record_id)}.json"
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    # -------------------------------------------------------------------------
    # Pay packages
    # -------------------------------------------------------------------------

    def create_package(self, package: PackageLike) -> StoredPayPackage:
        """Calculate and store a new pay package.

        Raises:
            PackageValidationError: If required descriptive fields or dates are missing
        """
        result = calculate(package)
        require_valid_package(result)

        with _LOCK:
            stored = StoredPayPackage(
                **result.model_dump(),
                id=self._next_id(PACKAGES),
                created_at=self.clock(),
            )
            self._save(PACKAGES, stored)

        logger.info(f"Created pay package {stored.id} for {stored.provider_name} at {stored.facility}")
        return stored

    def get_package(self, package_id: int) -> Optional[StoredPayPackage]:
        data = self._load(PACKAGES, package_id)
        return StoredPayPackage.model_validate(data) if data else None

    def list_packages(self) -> List[StoredPayPackage]:
        """All packages, most recently created first."""
        packages = [StoredPayPackage.model_validate(d) for d in self._scan(PACKAGES)]
        packages.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        return packages

    def recent_packages(self, limit: int = 5) -> List[StoredPayPackage]:
        return self.list_packages()[:max(limit, 0)]

    def update_package(self, package_id: int, changes: Mapping[str, Any]) -> Optional[StoredPayPackage]:
        """Apply edits to a stored package and recalculate it.

        Input fields in changes override the stored inputs (full or partial
        edits both work). email_sent/sms_sent may be set directly. Derived
        fields, id and created_at in changes are ignored.

        Returns:
            Updated package, or None if package_id is unknown

        Raises:
            PackageValidationError: If the edited package is no longer valid
        """
        with _LOCK:
            current = self.get_package(package_id)
            if current is None:
                return None

            merged = {**current.inputs().model_dump(), **input_fields(changes)}
            result = calculate(merged)
            require_valid_package(result)

            flags = {"email_sent": current.email_sent, "sms_sent": current.sms_sent}
            for key, value in changes.items():
                if key in FLAG_FIELDS:
                    flags[FLAG_FIELDS[key]] = bool(value)

            updated = StoredPayPackage(
                **result.model_dump(),
                id=current.id,
                created_at=current.created_at,
                **flags,
            )
            self._save(PACKAGES, updated)

        return updated

    def delete_package(self, package_id: int) -> bool:
        """Delete a package along with its journal entries, reminders and logs.

        Returns:
            True if the package existed, False otherwise
        """
        with _LOCK:
            if not self._delete(PACKAGES, package_id):
                return False
            for collection in (JOURNAL_ENTRIES, REMINDERS, COMMUNICATION_LOGS):
                for data in self._scan(collection):
                    if data.get("pay_package_id") == package_id:
                        self._delete(collection, data["id"])

        logger.info(f"Deleted pay package {package_id}")
        return True

    def _require_package(self, package_id: int) -> None:
        if not (self._dir(PACKAGES) / f"{int(package_id)}.json").exists():
            raise PackageNotFoundError(package_id)

    # -------------------------------------------------------------------------
    # Journal entries
    # -------------------------------------------------------------------------

    def create_journal_entry(self, entry: Union[JournalEntryInput, Mapping[str, Any]]) -> JournalEntry:
        """Store a journal entry for an existing package.

        Raises:
            pydantic.ValidationError: If entry is malformed
            PackageNotFoundError: If the owning package does not exist
        """
        if not isinstance(entry, JournalEntryInput):
            entry = JournalEntryInput.model_validate(entry)

        with _LOCK:
            self._require_package(entry.pay_package_id)
            now = self.clock()
            stored = JournalEntry(
                **entry.model_dump(),
                id=self._next_id(JOURNAL_ENTRIES),
                created_at=now,
                updated_at=now,
            )
            self._save(JOURNAL_ENTRIES, stored)
        return stored

    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        data = self._load(JOURNAL_ENTRIES, entry_id)
        return JournalEntry.model_validate(data) if data else None

    def list_journal_entries(self, package_id: Optional[int] = None) -> List[JournalEntry]:
        """Journal entries (optionally for one package), newest first."""
        entries = [JournalEntry.model_validate(d) for d in self._scan(JOURNAL_ENTRIES)]
        if package_id is not None:
            entries = [e for e in entries if e.pay_package_id == package_id]
        entries.sort(key=lambda e: (e.created_at, e.id), reverse=True)
        return entries

    def update_journal_entry(self, entry_id: int, changes: Mapping[str, Any]) -> Optional[JournalEntry]:
        """Edit title/content/entry_type. The owning package cannot change."""
        with _LOCK:
            current = self.get_journal_entry(entry_id)
            if current is None:
                return None
            edits = known_fields(JournalEntryInput, changes)
            edits.pop("pay_package_id", None)
            entry = JournalEntryInput.model_validate({
                **current.model_dump(include=set(JournalEntryInput.model_fields)),
                **edits,
            })
            updated = JournalEntry(
                **entry.model_dump(),
                id=current.id,
                created_at=current.created_at,
                updated_at=self.clock(),
            )
            self._save(JOURNAL_ENTRIES, updated)
        return updated

    def delete_journal_entry(self, entry_id: int) -> bool:
        with _LOCK:
            return self._delete(JOURNAL_ENTRIES, entry_id)

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    def create_reminder(self, reminder: Union[ReminderInput, Mapping[str, Any]]) -> Reminder:
        """Store a reminder for an existing package.

        Raises:
            pydantic.ValidationError: If reminder is malformed
            PackageNotFoundError: If the owning package does not exist
        """
        if not isinstance(reminder, ReminderInput):
            reminder = ReminderInput.model_validate(reminder)

        with _LOCK:
            self._require_package(reminder.pay_package_id)
            stored = Reminder(
                **reminder.model_dump(),
                id=self._next_id(REMINDERS),
                created_at=self.clock(),
            )
            self._save(REMINDERS, stored)
        return stored

    def get_reminder(self, reminder_id: int) -> Optional[Reminder]:
        data = self._load(REMINDERS, reminder_id)
        return Reminder.model_validate(data) if data else None

    def _all_reminders(self) -> List[Reminder]:
        return [Reminder.model_validate(d) for d in self._scan(REMINDERS)]

    def reminders_for_package(self, package_id: int) -> List[Reminder]:
        """Every reminder of one package, incomplete first then by due date."""
        return sort_reminders(r for r in self._all_reminders() if r.pay_package_id == package_id)

    def list_reminders(self, include_completed: bool = False) -> List[Reminder]:
        """Reminders across all packages, ordered by due date then priority."""
        reminders = self._all_reminders()
        if not include_completed:
            reminders = [r for r in reminders if not r.is_completed]
        return sort_reminders(reminders)

    def upcoming_reminders(self, days: int = 7, today: Optional[date] = None) -> List[Reminder]:
        """Incomplete reminders due from today through today + days (inclusive)."""
        today = today or self.clock().date()
        horizon = today + timedelta(days=days)
        return sort_reminders(
            r for r in self._all_reminders()
            if not r.is_completed and today <= r.due_date <= horizon
        )

    def update_reminder(self, reminder_id: int, changes: Mapping[str, Any]) -> Optional[Reminder]:
        """Edit a reminder. The owning package cannot change."""
        with _LOCK:
            current = self.get_reminder(reminder_id)
            if current is None:
                return None
            edits = known_fields(ReminderInput, changes)
            edits.pop("pay_package_id", None)
            reminder = ReminderInput.model_validate({
                **current.model_dump(include=set(ReminderInput.model_fields)),
                **edits,
            })
            updated = Reminder(**reminder.model_dump(), id=current.id, created_at=current.created_at)
            self._save(REMINDERS, updated)
        return updated

    def mark_reminder_complete(self, reminder_id: int, is_completed: bool = True) -> Optional[Reminder]:
        return self.update_reminder(reminder_id, {"is_completed": bool(is_completed)})

    def delete_reminder(self, reminder_id: int) -> bool:
        with _LOCK:
            return self._delete(REMINDERS, reminder_id)

    # -------------------------------------------------------------------------
    # Communication logs
    # -------------------------------------------------------------------------

    def create_communication_log(
        self, log: Union[CommunicationLogInput, Mapping[str, Any]]
    ) -> CommunicationLog:
        """Record one delivery attempt (successful or failed)."""
        if not isinstance(log, CommunicationLogInput):
            log = CommunicationLogInput.model_validate(log)

        with _LOCK:
            stored = CommunicationLog(
                **log.model_dump(),
                id=self._next_id(COMMUNICATION_LOGS),
                sent_at=self.clock(),
            )
            self._save(COMMUNICATION_LOGS, stored)
        return stored

    def list_communication_logs(self, package_id: int) -> List[CommunicationLog]:
        """Delivery attempts for one package, newest first."""
        logs = [
            CommunicationLog.model_validate(d)
            for d in self._scan(COMMUNICATION_LOGS)
            if d.get("pay_package_id") == package_id
        ]
        logs.sort(key=lambda log: (log.sent_at, log.id), reverse=True)
        return logs
