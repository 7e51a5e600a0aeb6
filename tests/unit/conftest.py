"""Shared fixtures for staff-calc unit tests."""

import json
from datetime import datetime, timedelta

import pytest


# Travel nurse package used across tests. Weekly gross 2900, revenue 3060,
# 13 contract weeks; the agency loses money on it (negative margin).
SAMPLE_PACKAGE = {
    "providerName": "Sarah Johnson",
    "specialty": "nursing",
    "facility": "Memorial Hospital",
    "location": "Boston, MA",
    "startDate": "2023-06-15",
    "endDate": "2023-09-10",
    "hoursPerWeek": 36,
    "billRate": 85,
    "regularPayRate": 40,
    "overtimePayRate": 60,
    "taxableStipend": 250,
    "nonTaxableStipend": 800,
    "mealsStipend": 350,
    "travelStipend": 0,
    "employerTaxes": 7.65,
    "workersComp": 2,
    "healthInsurance": 350,
    "professionalLiability": 100,
    "housing": 0,
    "travel": 0,
    "bonus": 0,
    "otherCosts": 150,
    "notes": "Night shift, ICU float pool",
}


@pytest.fixture
def sample_package():
    """A fresh copy of the sample package inputs (camelCase keys)."""
    return dict(SAMPLE_PACKAGE)


class StepClock:
    """Deterministic clock: each call returns one minute later than the last."""

    def __init__(self, start=datetime(2024, 6, 1, 9, 0, 0)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point config and data at a temp directory."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"

    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("STAFF_CALC_CONFIG_PATH", str(config_dir))

    settings = {"data_dir": str(data_dir)}
    (config_dir / "settings.json").write_text(json.dumps(settings))

    return {
        "config_dir": config_dir,
        "data_dir": data_dir,
        "records_dir": data_dir / "records",
        "outbox_dir": data_dir / "outbox",
    }
