from engine.rates import calculate_monthly_payment, daily_rate, month_interest, term_months
from engine.models import MonthResult

# Balances at or below one cent count as repaid.
PAID_OFF_EPSILON = 0.01


class Mortgage:
    """
    Running balance of a single loan during one schedule calculation.
    Supports extra principal repayments and an offset amount that reduces
    the interest-bearing part of this loan's balance.
    """

    def __init__(self, principal, annual_rate, term_years, extra_payment_percent=0, offset_amount=0):
        """
        Initialize mortgage.

        Args:
            principal: Starting balance
            annual_rate: Annual interest rate as a percentage (e.g. 4.5)
            term_years: Loan term in years
            extra_payment_percent: Extra repayment as % of the monthly payment
            offset_amount: Amount offsetting this loan's balance for interest
        """
        self.principal_remaining = max(0, principal)
        self.daily_rate = daily_rate(annual_rate)
        self.offset_amount = max(0, offset_amount)
        self.months_elapsed = 0
        self.term_months = term_months(term_years)

        self.monthly_payment = calculate_monthly_payment(principal, annual_rate, term_years)
        self.extra_payment = self.monthly_payment * extra_payment_percent / 100

    def make_payment(self, days):
        """
        Process one month of payments.

        Args:
            days: Actual number of days in the month being paid

        Returns:
            MonthResult with principal (regular plus extra), interest and
            the extra portion, or None if the loan is already paid off.
        """
        if self.is_paid_off():
            return None

        balance = self.principal_remaining
        interest_bearing = max(0, balance - self.offset_amount)
        interest = month_interest(interest_bearing, self.daily_rate, days)

        # Negative when interest exceeds the payment; the extra covers the shortfall first
        regular = min(self.monthly_payment - interest, balance)
        if self.months_elapsed + 1 >= self.term_months:
            # Final instalment settles the residual left by leap-year days
            regular = balance
        # Ensure we don't overpay principal
        principal = max(0, min(regular + self.extra_payment, balance))

        self.principal_remaining = balance - principal
        self.months_elapsed += 1

        return MonthResult(principal=principal, interest=interest, extra=principal - max(0, regular))

    def is_paid_off(self):
        """Check if mortgage is fully paid (or cannot be amortized at all)."""
        return self.principal_remaining <= PAID_OFF_EPSILON or self.monthly_payment <= 0

