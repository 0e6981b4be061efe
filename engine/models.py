from __future__ import annotations

from dataclasses import dataclass, field, asdict


@dataclass(frozen=True)
class OffsetAccount:
    """
    Offset account parameters.

    In the two-loan comparison these describe a separate offset loan
    (amount, term_years, rate) whose own interest-bearing balance is
    reduced by offset_amount.
    """
    amount: float
    term_years: float
    rate: float
    offset_amount: float


@dataclass(frozen=True)
class LoanTerms:
    """One loan as supplied by the caller. Rates are percentages."""
    loan_id: str
    principal: float
    annual_rate: float
    term_years: float
    extra_payment_percent: float = 0.0
    offset_account: OffsetAccount | None = None

    @property
    def offset_amount(self) -> float:
        if self.offset_account is None:
            return 0.0
        return self.offset_account.offset_amount


@dataclass(frozen=True)
class MonthResult:
    """Amounts applied to one loan in one month."""
    principal: float
    interest: float
    extra: float


@dataclass(frozen=True)
class LoanBreakdown:
    principal: float
    interest: float


@dataclass(frozen=True)
class LoanMonthlyPayment:
    main: float
    extra: float
    offset: float = 0.0


@dataclass(frozen=True)
class YearlyPayment:
    """
    Totals for one schedule year, rounded to cents.

    loan_payments is empty unless the schedule was produced by the
    multi-loan calculation. The main/offset loan fields are only filled
    by the accelerated calculation.
    """
    year: int
    principal: float
    interest: float
    total: float
    remaining_balance: float
    extra_payments: float = 0.0
    main_loan_principal: float = 0.0
    main_loan_interest: float = 0.0
    offset_loan_principal: float = 0.0
    offset_loan_interest: float = 0.0
    loan_payments: dict[str, LoanBreakdown] = field(default_factory=dict)

    def to_record(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MortgageComparison:
    standard_payments: list[YearlyPayment]
    accelerated_payments: list[YearlyPayment]
    standard_months: int
    accelerated_months: int
    months_saved: int
    years_saved: int
    months_saved_decimal: float
    total_monthly_payment: float
    main_loan_monthly_payment: float
    offset_loan_monthly_payment: float
    total_extra_payments: float
    loan_monthly_payments: dict[str, LoanMonthlyPayment] = field(default_factory=dict)


@dataclass(frozen=True)
class MultiLoanResult:
    yearly_payments: list[YearlyPayment]
    total_monthly_payment: float
    loan_monthly_payments: dict[str, LoanMonthlyPayment]
