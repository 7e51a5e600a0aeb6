"""Staff Calc - Healthcare staffing pay package calculator."""

__version__ = "0.3.0"
