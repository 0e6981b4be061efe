import io
import logging
from dataclasses import asdict

import pandas as pd

from schemas.mortgage import PaymentParams, ComparisonParams, LoanParams, MultiLoanParams
from engine.core import (
    calculate_multiple_loans,
    calculate_yearly_payments,
    calculate_yearly_payments_with_extras,
)
from engine.rates import calculate_monthly_payment
from engine.models import LoanTerms, OffsetAccount

logger = logging.getLogger(__name__)


def map_to_loan_terms(params: LoanParams) -> LoanTerms:
    """
    Convert a validated loan to engine terms.

    An offset amount entered against a loan offsets that loan, so it
    shares the loan's rate and term.
    """
    offset_amount = params.offset_amount or 0
    offset_account = None
    if offset_amount > 0:
        offset_account = OffsetAccount(
            amount=offset_amount,
            term_years=params.term_years,
            rate=params.rate,
            offset_amount=offset_amount,
        )

    return LoanTerms(
        loan_id=params.id,
        principal=params.amount,
        annual_rate=params.rate,
        term_years=params.term_years,
        extra_payment_percent=params.extra_payment_percent,
        offset_account=offset_account,
    )


def map_to_offset_account(params: ComparisonParams):
    if params.offset_account is None:
        return None
    return OffsetAccount(
        amount=params.offset_account.amount,
        term_years=params.offset_account.term_years,
        rate=params.offset_account.rate,
        offset_amount=params.offset_account.offset_amount,
    )


def schedule_frame(yearly_payments) -> pd.DataFrame:
    """One row per year; per-loan breakdowns become loan_<id>_* columns."""
    records = []
    for payment in yearly_payments:
        record = payment.to_record()
        for loan_id, breakdown in record.pop('loan_payments').items():
            record[f'loan_{loan_id}_principal'] = breakdown['principal']
            record[f'loan_{loan_id}_interest'] = breakdown['interest']
        records.append(record)
    return pd.DataFrame(records)


def format_results(df: pd.DataFrame) -> dict:
    """Format engine results for API response"""
    if df.empty:
        return {'results': [], 'columns': []}

    header = list(df.columns)

    results_json = []
    for _, row in df.iterrows():
        row_dict = {}
        for col in header:
            val = row[col]
            if pd.isna(val):
                row_dict[col] = None
            elif hasattr(val, 'item'):
                row_dict[col] = val.item()
            else:
                row_dict[col] = val
        results_json.append(row_dict)

    return {
        'results': results_json,
        'columns': header
    }


def summarize(df: pd.DataFrame) -> dict:
    """Total principal, interest and payments over a schedule."""
    if df.empty:
        return {'total_principal': 0.0, 'total_interest': 0.0, 'total_paid': 0.0}
    return {
        'total_principal': round(float(df['principal'].sum()), 2),
        'total_interest': round(float(df['interest'].sum()), 2),
        'total_paid': round(float(df['total'].sum()), 2),
    }


def run_monthly_payment_service(params: PaymentParams):
    return {
        'success': True,
        'monthly_payment': calculate_monthly_payment(params.amount, params.rate, params.term_years),
    }


def run_schedule_service(params: PaymentParams):
    """
    Service to compute the standard yearly schedule of one loan.
    """
    df = schedule_frame(calculate_yearly_payments(params.amount, params.rate, params.term_years))
    return {
        'success': True,
        'config': params.model_dump(),
        'schedule': format_results(df),
        'summary': summarize(df),
    }


def run_comparison_service(params: ComparisonParams):
    """
    Service to compare standard repayment against extra payments and/or
    an offset loan.
    """
    comparison = calculate_yearly_payments_with_extras(
        params.amount,
        params.rate,
        params.term_years,
        params.extra_payment_percent,
        map_to_offset_account(params),
    )
    logger.info(
        "Comparison for %s over %s years: %s months saved",
        params.amount, params.term_years, comparison.months_saved,
    )

    standard_df = schedule_frame(comparison.standard_payments)
    accelerated_df = schedule_frame(comparison.accelerated_payments)

    return {
        'success': True,
        'config': params.model_dump(),
        'scenarios': {
            'standard': format_results(standard_df),
            'accelerated': format_results(accelerated_df),
        },
        'summaries': {
            'standard': summarize(standard_df),
            'accelerated': summarize(accelerated_df),
        },
        'standard_months': comparison.standard_months,
        'accelerated_months': comparison.accelerated_months,
        'months_saved': comparison.months_saved,
        'years_saved': comparison.years_saved,
        'months_saved_decimal': comparison.months_saved_decimal,
        'total_monthly_payment': comparison.total_monthly_payment,
        'main_loan_monthly_payment': comparison.main_loan_monthly_payment,
        'offset_loan_monthly_payment': comparison.offset_loan_monthly_payment,
        'total_extra_payments': comparison.total_extra_payments,
        'loan_monthly_payments': {
            loan_id: asdict(payment) for loan_id, payment in comparison.loan_monthly_payments.items()
        },
    }


def calculable_loans(params: MultiLoanParams):
    """Loans worth calculating; zero-amount loans are skipped."""
    loans = [map_to_loan_terms(loan) for loan in params.loans if loan.amount > 0]
    if not loans:
        raise ValueError("Please enter valid values for at least one loan")
    return loans


def run_multi_loan_service(params: MultiLoanParams):
    """
    Service to run all loans together and return combined yearly totals
    with a per-loan breakdown.
    """
    loans = calculable_loans(params)
    logger.info("Calculating schedule for %s loan(s)", len(loans))

    result = calculate_multiple_loans(loans)
    df = schedule_frame(result.yearly_payments)

    return {
        'success': True,
        'config': params.model_dump(),
        'loan_ids': [loan.loan_id for loan in loans],
        'yearly_payments': format_results(df),
        'total_monthly_payment': result.total_monthly_payment,
        'loan_monthly_payments': {
            loan_id: asdict(payment) for loan_id, payment in result.loan_monthly_payments.items()
        },
        'summary': summarize(df),
    }


def export_schedule_csv(params: MultiLoanParams) -> str:
    """Combined yearly schedule as CSV text."""
    result = calculate_multiple_loans(calculable_loans(params))
    output = io.StringIO()
    schedule_frame(result.yearly_payments).to_csv(output, index=False)
    return output.getvalue()
