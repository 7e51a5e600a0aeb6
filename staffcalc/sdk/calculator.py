"""Pay package calculation engine.

Pure functions: a PayPackageInput in, a PayPackageResult out. No I/O, no
shared state, so calculations can run from any thread or process.

The derived figures form a chain, computed in this order:

    regular_pay           = regular_pay_rate * hours_per_week
    taxable_pay           = regular_pay + taxable_stipend
    weekly_gross          = regular_pay + overtime_pay_rate + all four stipends
    contract_total        = weekly_gross * contract_weeks
    weekly_agency_revenue = bill_rate * hours_per_week
    total_agency_revenue  = weekly_agency_revenue * contract_weeks
    weekly_agency_costs   = weekly_gross + employer taxes + workers' comp
                            + flat burdens + additional costs
    weekly_agency_margin  = weekly_agency_revenue - weekly_agency_costs
    weekly_net_pay        = weekly_gross - synthetic withholding on taxable_pay

overtime_pay_rate is a flat weekly amount added to gross, not a rate times
hours. Historical packages were stored with that behavior.
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Union

from .duration import resolve_contract_weeks
from .schemas import PayPackageInput, PayPackageResult, input_fields


# Synthetic paycheck withholding model, applied to taxable pay.
# An estimate for provider conversations, not a payroll calculation.
WITHHOLDING_RATES = {
    "federal": 0.12,
    "social_security": 0.062,
    "medicare": 0.0145,
    "state": 0.04,
}


@dataclass(frozen=True)
class WithholdingBreakdown:
    """Estimated weekly withholding lines on taxable pay."""

    taxable_pay: float
    federal: float
    social_security: float
    medicare: float
    state: float

    @property
    def total(self) -> float:
        return self.federal + self.social_security + self.medicare + self.state

    def to_dict(self) -> dict:
        return {**asdict(self), "total": self.total}


@dataclass(frozen=True)
class CostBreakdown:
    """Agency's weekly cost to employ the provider, by component."""

    weekly_gross: float
    employer_taxes: float
    workers_comp: float
    health_insurance: float
    professional_liability: float
    additional_costs: float

    @property
    def burdens(self) -> float:
        """Employer-side costs on top of gross pay."""
        return (
            self.employer_taxes
            + self.workers_comp
            + self.health_insurance
            + self.professional_liability
            + self.additional_costs
        )

    @property
    def total(self) -> float:
        return (
            self.weekly_gross
            + self.employer_taxes
            + self.workers_comp
            + self.health_insurance
            + self.professional_liability
            + self.additional_costs
        )

    def to_dict(self) -> dict:
        return {**asdict(self), "burdens": self.burdens, "total": self.total}


PackageLike = Union[PayPackageInput, Mapping[str, Any]]


def _as_input(package: PackageLike) -> PayPackageInput:
    """Normalize to a validated PayPackageInput (the numeric coercion edge)."""
    if isinstance(package, PayPackageResult):
        return package.inputs()
    if isinstance(package, PayPackageInput):
        return package
    return PayPackageInput.model_validate(input_fields(package))


def regular_pay(package: PayPackageInput) -> float:
    return package.regular_pay_rate * package.hours_per_week


def taxable_pay(package: PayPackageInput) -> float:
    """Regular pay plus taxable stipend: base for employer tax and withholding."""
    return regular_pay(package) + package.taxable_stipend


def weekly_gross(package: PayPackageInput) -> float:
    return (
        regular_pay(package)
        + package.overtime_pay_rate
        + package.taxable_stipend
        + package.non_taxable_stipend
        + package.meals_stipend
        + package.travel_stipend
    )


def withholding_breakdown(package: PackageLike) -> WithholdingBreakdown:
    """Synthetic withholding (12% federal, 6.2% SS, 1.45% Medicare, 4% state)."""
    package = _as_input(package)
    base = taxable_pay(package)
    return WithholdingBreakdown(
        taxable_pay=base,
        federal=base * WITHHOLDING_RATES["federal"],
        social_security=base * WITHHOLDING_RATES["social_security"],
        medicare=base * WITHHOLDING_RATES["medicare"],
        state=base * WITHHOLDING_RATES["state"],
    )


def cost_breakdown(package: PackageLike) -> CostBreakdown:
    """Weekly agency cost components.

    employer_taxes applies to taxable pay and workers_comp to regular pay;
    both are stored as percentage points and divided by 100 here.
    """
    package = _as_input(package)
    return CostBreakdown(
        weekly_gross=weekly_gross(package),
        employer_taxes=taxable_pay(package) * (package.employer_taxes / 100),
        workers_comp=regular_pay(package) * (package.workers_comp / 100),
        health_insurance=package.health_insurance,
        professional_liability=package.professional_liability,
        additional_costs=package.housing + package.travel + package.bonus + package.other_costs,
    )


def calculate(package: PackageLike) -> PayPackageResult:
    """Calculate all derived figures for a pay package.

    Accepts a PayPackageInput or any mapping of raw fields (camelCase or
    snake_case). Missing or non-numeric amounts count as zero and negative
    amounts flow through the arithmetic; this function does not raise on
    numeric input. Derived fields present in a mapping are ignored and
    recomputed.

    Returns:
        PayPackageResult with the inputs, contract_weeks, and the seven
        derived fields (all zero for an all-zero input).
    """
    package = _as_input(package)

    contract_weeks = resolve_contract_weeks(package.start_date, package.end_date)

    gross = weekly_gross(package)
    revenue = package.bill_rate * package.hours_per_week
    costs = cost_breakdown(package).total
    withholding = withholding_breakdown(package)

    return PayPackageResult(
        **package.model_dump(),
        contract_weeks=contract_weeks,
        weekly_gross=gross,
        contract_total=gross * contract_weeks,
        weekly_agency_revenue=revenue,
        total_agency_revenue=revenue * contract_weeks,
        weekly_agency_costs=costs,
        weekly_agency_margin=revenue - costs,
        weekly_net_pay=gross - withholding.total,
    )


# =============================================================================
# Display helpers
# =============================================================================


def hourly_rate(weekly_amount: float, hours_per_week: float) -> float:
    """Convert a weekly amount to an hourly figure (0 when hours <= 0)."""
    if not hours_per_week or hours_per_week <= 0:
        return 0.0
    return weekly_amount / hours_per_week


def percentage(value: float, total: float) -> str:
    """value as a percentage of total, one decimal ("0.0%" when total is 0)."""
    if not total:
        return "0.0%"
    return f"{value / total * 100:.1f}%"


def margin_percentage(result: PayPackageResult) -> str:
    """Weekly margin as a share of weekly revenue."""
    return percentage(result.weekly_agency_margin, result.weekly_agency_revenue)


def contract_net_pay(result: PayPackageResult) -> float:
    """Estimated take-home pay over the whole contract."""
    return result.weekly_net_pay * result.contract_weeks
