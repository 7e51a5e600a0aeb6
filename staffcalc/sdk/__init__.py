"""Staff Calc SDK - Pay package calculation, storage, and notification."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    get_agency_profile,
    get_notification_settings,
    ConfigNotFoundError,
    ProfileNotFoundError,
    # XDG paths
    get_data_path,
    get_outbox_path,
)

from .duration import (
    DEFAULT_CONTRACT_WEEKS,
    ContractDuration,
    contract_duration,
    parse_date,
    resolve_contract_weeks,
)

from .schemas import (
    PayPackageInput,
    PayPackageResult,
    StoredPayPackage,
    JournalEntryInput,
    JournalEntry,
    ReminderInput,
    Reminder,
    CommunicationLogInput,
    CommunicationLog,
    AgencyProfile,
    NotificationSettings,
)

from .calculator import (
    WITHHOLDING_RATES,
    CostBreakdown,
    WithholdingBreakdown,
    calculate,
    cost_breakdown,
    withholding_breakdown,
    hourly_rate,
    percentage,
    margin_percentage,
    contract_net_pay,
)

from .formatting import (
    format_currency,
    format_date,
    format_for_email,
    format_for_sms,
    email_subject,
)

from .reminders import (
    classify_due,
    due_label,
    sort_reminders,
)

from .store import (
    RecordStore,
    PackageValidationError,
    PackageNotFoundError,
    validate_package,
    require_valid_package,
    get_records_dir,
)

from .notify import (
    DeliveryResult,
    NotificationNotConfiguredError,
    OutboxSender,
    SmtpEmailSender,
    get_email_sender,
    get_sms_sender,
    send_package_email,
    send_package_sms,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "get_agency_profile",
    "get_notification_settings",
    "ConfigNotFoundError",
    "ProfileNotFoundError",
    "get_data_path",
    "get_outbox_path",
    # Duration
    "DEFAULT_CONTRACT_WEEKS",
    "ContractDuration",
    "contract_duration",
    "parse_date",
    "resolve_contract_weeks",
    # Schemas
    "PayPackageInput",
    "PayPackageResult",
    "StoredPayPackage",
    "JournalEntryInput",
    "JournalEntry",
    "ReminderInput",
    "Reminder",
    "CommunicationLogInput",
    "CommunicationLog",
    "AgencyProfile",
    "NotificationSettings",
    # Calculator
    "WITHHOLDING_RATES",
    "CostBreakdown",
    "WithholdingBreakdown",
    "calculate",
    "cost_breakdown",
    "withholding_breakdown",
    "hourly_rate",
    "percentage",
    "margin_percentage",
    "contract_net_pay",
    # Formatting
    "format_currency",
    "format_date",
    "format_for_email",
    "format_for_sms",
    "email_subject",
    # Reminders
    "classify_due",
    "due_label",
    "sort_reminders",
    # Store
    "RecordStore",
    "PackageValidationError",
    "PackageNotFoundError",
    "validate_package",
    "require_valid_package",
    "get_records_dir",
    # Notification
    "DeliveryResult",
    "NotificationNotConfiguredError",
    "OutboxSender",
    "SmtpEmailSender",
    "get_email_sender",
    "get_sms_sender",
    "send_package_email",
    "send_package_sms",
]
