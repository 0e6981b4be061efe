import logging
import math

from engine.mortgage import Mortgage
from engine.rates import CalendarCursor, term_months
from engine.models import (
    LoanBreakdown,
    LoanMonthlyPayment,
    MortgageComparison,
    MultiLoanResult,
    YearlyPayment,
)

logger = logging.getLogger(__name__)

# Key used for the single loan of an accelerated comparison
MAIN_LOAN_ID = "main"


def _cents(value):
    return round(value, 2)


def calculate_yearly_payments(principal, annual_rate, term_years):
    """
    Yearly principal/interest breakdown of a loan with no extras or offset.

    Each month accrues daily-compounded interest over the actual days in
    that calendar month. Totals are rounded only when a year is emitted.

    Returns:
        list of YearlyPayment, one per year with payments (fewer than
        term_years if the balance is cleared early)
    """
    mortgage = Mortgage(principal, annual_rate, term_years)
    max_months = term_months(term_years)
    cursor = CalendarCursor()
    yearly_payments = []

    for year in range(1, math.ceil(max_months / 12) + 1):
        if mortgage.is_paid_off():
            break

        yearly_principal = 0.0
        yearly_interest = 0.0

        for _ in range(12):
            if mortgage.is_paid_off() or mortgage.months_elapsed >= max_months:
                break

            result = mortgage.make_payment(cursor.days_in_month())
            yearly_principal += result.principal
            yearly_interest += result.interest
            cursor.advance()

        yearly_payments.append(YearlyPayment(
            year=year,
            principal=_cents(yearly_principal),
            interest=_cents(yearly_interest),
            total=_cents(yearly_principal + yearly_interest),
            remaining_balance=_cents(mortgage.principal_remaining),
        ))

    logger.debug("Baseline schedule: %s years for principal %s", len(yearly_payments), principal)
    return yearly_payments


def count_months_to_payoff(principal, annual_rate, term_years):
    """Months until the baseline balance is cleared, by direct simulation."""
    mortgage = Mortgage(principal, annual_rate, term_years)
    max_months = term_months(term_years)
    cursor = CalendarCursor()

    while not mortgage.is_paid_off() and mortgage.months_elapsed < max_months:
        mortgage.make_payment(cursor.days_in_month())
        cursor.advance()

    return mortgage.months_elapsed


def calculate_yearly_payments_with_extras(principal, annual_rate, term_years,
                                          extra_payment_percent=0, offset_account=None):
    """
    Compare a standard schedule with an accelerated one.

    Extra payments are a percentage of the monthly payment applied straight
    to principal. An offset account is run as a separate loan alongside the
    main one; its offset_amount only reduces interest on that offset loan.

    Args:
        principal: Main loan amount
        annual_rate: Annual rate as a percentage
        term_years: Main loan term in years
        extra_payment_percent: 0-20, clamped by the caller
        offset_account: OffsetAccount or None

    Returns:
        MortgageComparison
    """
    main_loan = Mortgage(principal, annual_rate, term_years, extra_payment_percent)

    offset_loan = None
    max_months = term_months(term_years)
    if offset_account is not None and offset_account.amount > 0:
        offset_loan = Mortgage(
            offset_account.amount,
            offset_account.rate,
            offset_account.term_years,
            offset_amount=offset_account.offset_amount,
        )
        max_months = max(max_months, term_months(offset_account.term_years))

    main_loan_monthly_payment = main_loan.monthly_payment
    offset_loan_monthly_payment = offset_loan.monthly_payment if offset_loan else 0.0
    loans = [loan for loan in (main_loan, offset_loan) if loan is not None]

    def all_paid_off():
        return all(loan.is_paid_off() for loan in loans)

    # --- Accelerated run ---
    cursor = CalendarCursor()
    accelerated_payments = []
    total_months = 0
    total_extra_payments = 0.0

    # Years are bounded by the main loan; a longer offset loan only extends max_months
    for year in range(1, math.ceil(term_months(term_years) / 12) + 1):
        if all_paid_off():
            break

        main_principal = main_interest = 0.0
        offset_principal = offset_interest = 0.0
        yearly_extra = 0.0

        for _ in range(12):
            if total_months >= max_months or all_paid_off():
                break
            total_months += 1
            days = cursor.days_in_month()

            main_result = main_loan.make_payment(days)
            if main_result is not None:
                main_principal += main_result.principal
                main_interest += main_result.interest
                yearly_extra += main_result.extra

            if offset_loan is not None:
                offset_result = offset_loan.make_payment(days)
                if offset_result is not None:
                    offset_principal += offset_result.principal
                    offset_interest += offset_result.interest

            cursor.advance()

        total_extra_payments += yearly_extra
        yearly_principal = main_principal + offset_principal
        yearly_interest = main_interest + offset_interest

        if yearly_principal > 0 or yearly_interest > 0:
            accelerated_payments.append(YearlyPayment(
                year=year,
                principal=_cents(yearly_principal),
                interest=_cents(yearly_interest),
                total=_cents(yearly_principal + yearly_interest),
                remaining_balance=_cents(main_loan.principal_remaining),
                extra_payments=_cents(yearly_extra),
                main_loan_principal=_cents(main_principal),
                main_loan_interest=_cents(main_interest),
                offset_loan_principal=_cents(offset_principal),
                offset_loan_interest=_cents(offset_interest),
            ))

    # --- Comparison ---
    standard_months = count_months_to_payoff(principal, annual_rate, term_years)
    accelerated_months = total_months
    months_saved = max(0, standard_months - accelerated_months)

    logger.debug(
        "Accelerated schedule: %s months vs %s standard", accelerated_months, standard_months
    )

    return MortgageComparison(
        standard_payments=calculate_yearly_payments(principal, annual_rate, term_years),
        accelerated_payments=accelerated_payments,
        standard_months=standard_months,
        accelerated_months=accelerated_months,
        months_saved=months_saved,
        years_saved=months_saved // 12,
        months_saved_decimal=months_saved / 12,
        total_monthly_payment=main_loan_monthly_payment + offset_loan_monthly_payment,
        main_loan_monthly_payment=main_loan_monthly_payment,
        offset_loan_monthly_payment=offset_loan_monthly_payment,
        total_extra_payments=_cents(total_extra_payments),
        loan_monthly_payments={
            MAIN_LOAN_ID: LoanMonthlyPayment(
                main=main_loan_monthly_payment,
                extra=main_loan.extra_payment,
                offset=offset_loan_monthly_payment,
            ),
        },
    )


def calculate_multiple_loans(loans):
    """
    Run several independent loans month by month on a shared calendar.

    Each loan's offset amount reduces interest on that same loan. The
    combined yearly totals keep a per-loan principal/interest breakdown.

    Args:
        loans: ordered sequence of LoanTerms

    Returns:
        MultiLoanResult
    """
    if not loans:
        return MultiLoanResult(yearly_payments=[], total_monthly_payment=0.0, loan_monthly_payments={})

    mortgages = []
    loan_monthly_payments = {}
    total_monthly_payment = 0.0

    for loan in loans:
        mortgage = Mortgage(
            loan.principal,
            loan.annual_rate,
            loan.term_years,
            loan.extra_payment_percent,
            loan.offset_amount,
        )
        mortgages.append((loan.loan_id, mortgage))

        # Offset accounts have no payments of their own
        loan_monthly_payments[loan.loan_id] = LoanMonthlyPayment(
            main=mortgage.monthly_payment,
            extra=mortgage.extra_payment,
            offset=0.0,
        )
        total_monthly_payment += mortgage.monthly_payment + mortgage.extra_payment

    max_term_years = max(math.ceil(loan.term_years) for loan in loans)
    cursor = CalendarCursor()
    yearly_payments = []

    for year in range(1, max_term_years + 1):
        yearly_principal = 0.0
        yearly_interest = 0.0
        loan_totals = {}

        for _ in range(12):
            month_has_payments = False
            days = cursor.days_in_month()

            for loan_id, mortgage in mortgages:
                result = mortgage.make_payment(days)
                if result is None:
                    continue

                month_has_payments = True
                totals = loan_totals.setdefault(loan_id, [0.0, 0.0])
                totals[0] += result.principal
                totals[1] += result.interest
                yearly_principal += result.principal
                yearly_interest += result.interest

            if not month_has_payments:
                break
            cursor.advance()

        if yearly_principal > 0 or yearly_interest > 0:
            remaining_balance = sum(mortgage.principal_remaining for _, mortgage in mortgages)
            yearly_payments.append(YearlyPayment(
                year=year,
                principal=_cents(yearly_principal),
                interest=_cents(yearly_interest),
                total=_cents(yearly_principal + yearly_interest),
                remaining_balance=_cents(remaining_balance),
                loan_payments={
                    loan_id: LoanBreakdown(principal=_cents(p), interest=_cents(i))
                    for loan_id, (p, i) in loan_totals.items()
                },
            ))

        if all(mortgage.is_paid_off() for _, mortgage in mortgages):
            break

    logger.debug("Multi-loan schedule: %s loans over %s years", len(mortgages), len(yearly_payments))
    return MultiLoanResult(
        yearly_payments=yearly_payments,
        total_monthly_payment=total_monthly_payment,
        loan_monthly_payments=loan_monthly_payments,
    )
