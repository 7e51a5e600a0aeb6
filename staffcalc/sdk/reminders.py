"""Reminder due-date classification and ordering for display."""

from datetime import date, timedelta
from typing import Iterable, List, Literal, Optional

from .schemas import Reminder


DueStatus = Literal["overdue", "today", "tomorrow", "upcoming"]

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def classify_due(due_date: date, today: Optional[date] = None) -> DueStatus:
    """Bucket a due date relative to today."""
    today = today or date.today()
    if due_date == today:
        return "today"
    if due_date == today + timedelta(days=1):
        return "tomorrow"
    if due_date < today:
        return "overdue"
    return "upcoming"


def due_label(reminder: Reminder, today: Optional[date] = None) -> str:
    """Short label: "Today", "Tomorrow", "Overdue - Jun 5", or "Jun 20, 2023"."""
    status = classify_due(reminder.due_date, today)
    due = reminder.due_date
    if status == "today":
        return "Today"
    if status == "tomorrow":
        return "Tomorrow"
    if status == "overdue":
        return f"Overdue - {due.strftime('%b')} {due.day}"
    return f"{due.strftime('%b')} {due.day}, {due.year}"


def sort_reminders(reminders: Iterable[Reminder]) -> List[Reminder]:
    """Incomplete first, then by due date, then high > medium > low."""
    return sorted(
        reminders,
        key=lambda r: (r.is_completed, r.due_date, PRIORITY_ORDER.get(r.priority, len(PRIORITY_ORDER)), r.id),
    )
