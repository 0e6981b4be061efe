import calendar

# Calendar epoch for day-count lookups. Schedules always start here so
# that identical inputs produce identical month lengths.
EPOCH_YEAR = 2024
EPOCH_MONTH = 0

DAYS_PER_YEAR = 365
AVERAGE_DAYS_PER_MONTH = DAYS_PER_YEAR / 12


def daily_rate(annual_rate):
    """Convert an annual nominal percentage (e.g. 4.5) to a daily rate."""
    return annual_rate / 100 / DAYS_PER_YEAR


def effective_monthly_rate(annual_rate):
    """
    Monthly rate equivalent to daily compounding over an average month.

    Only used to size the fixed payment. Individual months accrue interest
    over their actual day count (see month_interest).
    """
    return (1 + daily_rate(annual_rate)) ** AVERAGE_DAYS_PER_MONTH - 1


def month_interest(balance, rate_per_day, days):
    """Interest on balance compounded daily for the given number of days."""
    return balance * ((1 + rate_per_day) ** days - 1)


def days_in_month(year, month):
    """Days in a zero-based month of a Gregorian year (leap-year aware)."""
    return calendar.monthrange(year, month + 1)[1]


class CalendarCursor:
    """
    (year, zero-based month) position advanced one month at a time.

    Carries no meaning beyond picking the right day count for each
    simulated month.
    """

    def __init__(self, year=EPOCH_YEAR, month=EPOCH_MONTH):
        self.year = year
        self.month = month

    def days_in_month(self):
        return days_in_month(self.year, self.month)

    def advance(self):
        self.year += (self.month + 1) // 12
        self.month = (self.month + 1) % 12


def term_months(term_years):
    return int(round(term_years * 12))


def calculate_monthly_payment(principal, annual_rate, term_years):
    """
    Fixed monthly payment for a fully amortizing loan under daily compounding.

    Args:
        principal: Loan amount
        annual_rate: Annual nominal rate as a percentage (e.g. 4.5 for 4.5%)
        term_years: Loan term in years

    Returns:
        Monthly payment. 0 for non-positive principal or term and for
        negative rates; never raises.
    """
    if principal <= 0 or annual_rate < 0 or term_years <= 0:
        return 0.0

    number_of_months = term_years * 12

    if annual_rate == 0:
        # No interest - straight-line repayment
        return principal / number_of_months

    monthly_rate = effective_monthly_rate(annual_rate)

    # Standard amortization formula: P = L[c(1+c)^n]/[(1+c)^n-1]
    growth = (1 + monthly_rate) ** number_of_months
    return principal * monthly_rate * growth / (growth - 1)
