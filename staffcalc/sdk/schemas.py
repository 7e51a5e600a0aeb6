"""Pydantic schemas for staff-calc data validation.

These models are the typed input boundary: raw values from the CLI, YAML/JSON
files, or MCP callers are parsed once here, and everything downstream works
with floats, dates and date-times only.

Field names are snake_case; the camelCase names used by the web client's pay
package records (providerName, weeklyGross, ...) are accepted as aliases.
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .duration import parse_date


def coerce_number(value: Any) -> float:
    """Coerce a raw numeric input to float, treating anything unusable as 0.

    Strings may carry currency/percent decoration ("$1,250.00", "7.65%").
    None, blanks, NaN/inf and non-numeric values all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            cleaned = re.sub(r"[^\d.\-]", "", value)
            try:
                number = float(cleaned)
            except ValueError:
                return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Pay package schemas
# =============================================================================

NUMERIC_INPUT_FIELDS = (
    "hours_per_week",
    "bill_rate",
    "regular_pay_rate",
    "overtime_pay_rate",
    "taxable_stipend",
    "non_taxable_stipend",
    "meals_stipend",
    "travel_stipend",
    "employer_taxes",
    "workers_comp",
    "health_insurance",
    "professional_liability",
    "housing",
    "travel",
    "bonus",
    "other_costs",
)

DERIVED_FIELDS = (
    "weekly_gross",
    "contract_total",
    "weekly_agency_revenue",
    "total_agency_revenue",
    "weekly_agency_costs",
    "weekly_agency_margin",
    "weekly_net_pay",
)


class PayPackageInput(_Model):
    """Raw assignment inputs for one pay package."""

    # Assignment details
    provider_name: str = Field(default="", description="Provider full name")
    specialty: str = Field(default="", description="Provider specialty (nursing, physician, ...)")
    facility: str = Field(default="", description="Client facility name")
    location: str = Field(default="", description="Facility city/state")
    # Date-times keep their time and UTC offset
    start_date: Optional[Union[datetime, date]] = Field(default=None, description="Assignment start date")
    end_date: Optional[Union[datetime, date]] = Field(default=None, description="Assignment end date")
    hours_per_week: float = Field(default=0.0, description="Scheduled hours per week")
    bill_rate: float = Field(default=0.0, description="Hourly rate billed to the facility")

    # Pay rates
    regular_pay_rate: float = Field(default=0.0, description="Hourly regular pay rate")
    overtime_pay_rate: float = Field(
        default=0.0,
        description=(
            "Flat weekly overtime amount. Despite the name this is NOT multiplied "
            "by hours; stored packages were computed with the flat amount."
        ),
    )
    taxable_stipend: float = Field(default=0.0, description="Weekly taxable stipend")
    non_taxable_stipend: float = Field(default=0.0, description="Weekly non-taxable stipend")
    meals_stipend: float = Field(default=0.0, description="Weekly meals & incidentals stipend")
    travel_stipend: float = Field(default=0.0, description="Weekly travel stipend")

    # Standard burdens
    employer_taxes: float = Field(default=0.0, description="Employer tax, percentage points of taxable pay")
    workers_comp: float = Field(default=0.0, description="Workers' comp, percentage points of regular pay")
    health_insurance: float = Field(default=0.0, description="Weekly health insurance cost")
    professional_liability: float = Field(default=0.0, description="Weekly malpractice/liability cost")

    # Additional costs
    housing: float = Field(default=0.0, description="Weekly agency housing cost")
    travel: float = Field(default=0.0, description="Weekly agency travel cost")
    bonus: float = Field(default=0.0, description="Weekly bonus cost")
    other_costs: float = Field(default=0.0, description="Other weekly agency costs")

    notes: Optional[str] = Field(default=None, description="Free text, not used in calculation")

    @field_validator(*NUMERIC_INPUT_FIELDS, mode="before")
    @classmethod
    def _coerce_numeric(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Optional[Union[datetime, date]]:
        return parse_date(value)

    @field_validator("provider_name", "specialty", "facility", "location", mode="before")
    @classmethod
    def _blank_strings(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()


class PayPackageResult(PayPackageInput):
    """Inputs plus the seven derived figures.

    Margin and net pay may be negative; that is a business signal, not an error.
    """

    contract_weeks: int = Field(..., description="Resolved contract duration in weeks")
    weekly_gross: float
    contract_total: float
    weekly_agency_revenue: float
    total_agency_revenue: float
    weekly_agency_costs: float
    weekly_agency_margin: float
    weekly_net_pay: float

    def inputs(self) -> PayPackageInput:
        """The input half of this record."""
        return PayPackageInput.model_validate(self.model_dump(include=set(PayPackageInput.model_fields)))


class StoredPayPackage(PayPackageResult):
    """A calculated package as persisted by the record store."""

    id: int
    created_at: datetime
    email_sent: bool = False
    sms_sent: bool = False


def known_fields(model: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the keys of data that are fields of model, keyed by field name.

    Accepts snake_case names and camelCase aliases.
    """
    names = {}
    for name, field in model.model_fields.items():
        names[name] = name
        if field.alias:
            names[field.alias] = name
    return {names[key]: value for key, value in data.items() if key in names}


def input_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the PayPackageInput fields of a record.

    Full result records (with derived fields, ids, flags) can be fed back
    into a recalculation this way.
    """
    return known_fields(PayPackageInput, data)


# =============================================================================
# Journal, reminder, and communication log schemas
# =============================================================================

EntryType = Literal["note", "response", "followup", "call", "email", "other"]
Priority = Literal["low", "medium", "high"]


class JournalEntryInput(_Model):
    """A note attached to a pay package."""

    pay_package_id: int
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    entry_type: EntryType = "note"


class JournalEntry(JournalEntryInput):
    id: int
    created_at: datetime
    updated_at: datetime


class ReminderInput(_Model):
    """A follow-up reminder attached to a pay package."""

    pay_package_id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: date
    priority: Priority = "medium"
    is_completed: bool = False

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value: Any) -> Any:
        parsed = parse_date(value)
        if parsed is None:
            # Let pydantic report the raw value as invalid
            return value
        return parsed.date() if isinstance(parsed, datetime) else parsed


class Reminder(ReminderInput):
    id: int
    created_at: datetime


class CommunicationLogInput(_Model):
    """One email/SMS delivery attempt."""

    pay_package_id: int
    type: Literal["email", "sms"]
    recipient: str
    status: Literal["success", "failed"]
    error_message: Optional[str] = None


class CommunicationLog(CommunicationLogInput):
    id: int
    sent_at: datetime


# =============================================================================
# Profile schemas
# =============================================================================


class AgencyProfile(_Model):
    """Agency branding shown in provider emails and texts."""

    name: str = "Adelphi Healthcare Staffing"
    address: str = "123 Healthcare Avenue, Suite 300, New York, NY 10001"
    phone: str = "(800) 555-1234"
    email: str = "info@adelphihealthcare.com"


class EmailSettings(_Model):
    """Email delivery backend."""

    backend: Literal["smtp", "outbox"] = "outbox"
    host: Optional[str] = None
    port: int = Field(default=587, gt=0)
    username: Optional[str] = None
    password: Optional[str] = None
    sender: str = '"Adelphi Healthcare Staffing" <info@adelphihealthcare.com>'
    use_tls: bool = True

    @model_validator(mode="after")
    def check_smtp_host(self) -> "EmailSettings":
        if self.backend == "smtp" and not self.host:
            raise ValueError("notifications.email.host is required for the smtp backend")
        return self


class SmsSettings(_Model):
    """SMS delivery backend. 'none' means SMS is not configured."""

    backend: Literal["outbox", "none"] = "none"
    sender: Optional[str] = Field(default=None, description="Sending phone number")


class NotificationSettings(_Model):
    email: EmailSettings = Field(default_factory=EmailSettings)
    sms: SmsSettings = Field(default_factory=SmsSettings)
