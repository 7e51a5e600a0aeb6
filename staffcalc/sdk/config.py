"""Configuration management for Staff Calc.

Configuration is split into two files:

1. settings.json - Machine-specific, ephemeral settings
   - data_dir: where records and the outbox live
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - Agency configuration
   - agency: name, address, phone, email used in provider messages
   - notifications: email/SMS delivery backends

Config directory resolution:
1. STAFF_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/staff-calc/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set)
2. profile.yaml in same config directory

Data path resolution:
1. settings.json "data_dir" key
2. XDG_DATA_HOME/staff-calc/ or ~/.local/share/staff-calc/
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .schemas import AgencyProfile, NotificationSettings


APP_NAME = "staff-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"


class ConfigNotFoundError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. STAFF_CALC_CONFIG_PATH environment variable
    2. ~/.config/staff-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("STAFF_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    settings = load_settings()
    custom_profile = settings.get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Fix or remove the 'profile' key in {get_settings_path()}"
            )
        return profile_path

    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Set agency details with: staff-calc profile agency --name ..."
        )

    return profile_path


def load_profile(require_exists: bool = False) -> dict:
    """Load the agency profile from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the agency profile to profile.yaml.

    Args:
        profile: Profile dictionary to save
        path: Optional custom path (uses default if not specified)

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key.

    Args:
        key: Dot-notation key (e.g., "notifications.email.host")
        default: Default value if key not found
    """
    value = load_profile()

    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


def set_profile_value(key: str, value: Any) -> Path:
    """Set a profile value by dot-notation key.

    Returns:
        Path to the saved profile file
    """
    profile = load_profile()

    parts = key.split(".")
    current = profile

    # Navigate/create nested structure
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value

    return save_profile(profile)


def get_agency_profile() -> AgencyProfile:
    """Agency branding used in provider-facing messages.

    Falls back to the built-in defaults for any key the profile omits.

    Raises:
        ConfigNotFoundError: If the profile's agency section is invalid
    """
    try:
        return AgencyProfile.model_validate(load_profile().get("agency") or {})
    except ValidationError as e:
        raise ConfigNotFoundError(f"Invalid 'agency' section in {get_profile_path()}:\n{e}")


def get_notification_settings() -> NotificationSettings:
    """Delivery backends for email and SMS.

    Raises:
        ConfigNotFoundError: If the profile's notifications section is invalid
    """
    try:
        return NotificationSettings.model_validate(load_profile().get("notifications") or {})
    except ValidationError as e:
        raise ConfigNotFoundError(f"Invalid 'notifications' section in {get_profile_path()}:\n{e}")


# =============================================================================
# XDG path helpers
# =============================================================================

def get_data_path() -> Path:
    """Get the data directory path.

    Uses the settings.json "data_dir" key when set, otherwise
    XDG_DATA_HOME/staff-calc/.

    Returns:
        Path to the data directory (created if doesn't exist)
    """
    custom = get_setting("data_dir")
    if custom:
        data_path = Path(custom).expanduser()
    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        data_path = Path(xdg_data_home) / APP_NAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_outbox_path() -> Path:
    """Directory the outbox delivery backend writes messages to."""
    path = get_data_path() / "outbox"
    path.mkdir(parents=True, exist_ok=True)
    return path
