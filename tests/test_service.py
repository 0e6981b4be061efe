import io
import unittest
import os
import sys

import pandas as pd
from pydantic import ValidationError

# Add parent dir to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from schemas.mortgage import PaymentParams, ComparisonParams, LoanParams, MultiLoanParams
from services.mortgage_service import (
    export_schedule_csv,
    format_results,
    map_to_loan_terms,
    run_comparison_service,
    run_multi_loan_service,
    run_schedule_service,
    schedule_frame,
    summarize,
)


class TestSchemas(unittest.TestCase):
    def test_extra_percent_is_clamped(self):
        self.assertEqual(LoanParams(id='1', amount=1, rate=1, term_years=1, extra_payment_percent=35).extra_payment_percent, 20)
        self.assertEqual(LoanParams(id='1', amount=1, rate=1, term_years=1, extra_payment_percent=-5).extra_payment_percent, 0)
        self.assertEqual(LoanParams(id='1', amount=1, rate=1, term_years=1, extra_payment_percent='').extra_payment_percent, 0)
        self.assertEqual(ComparisonParams(amount=1, rate=1, term_years=1, extra_payment_percent='7.5').extra_payment_percent, 7.5)

    def test_invalid_values_rejected(self):
        with self.assertRaises(ValidationError):
            PaymentParams(amount=-1, rate=4.5, term_years=30)
        with self.assertRaises(ValidationError):
            PaymentParams(amount=1000, rate=-0.5, term_years=30)
        with self.assertRaises(ValidationError):
            PaymentParams(amount=1000, rate=4.5, term_years=0)
        with self.assertRaises(ValidationError):
            LoanParams(id='1', amount=1000, rate=4.5, term_years=30, offset_amount=-10)

    def test_loan_ids_unique(self):
        loan = {'id': '1', 'amount': 1000, 'rate': 4, 'term_years': 5}
        with self.assertRaises(ValidationError):
            MultiLoanParams(loans=[loan, loan])
        with self.assertRaises(ValidationError):
            MultiLoanParams(loans=[])


class TestLoanMapping(unittest.TestCase):
    def test_offset_amount_becomes_own_offset(self):
        terms = map_to_loan_terms(LoanParams(id='7', amount=300000, rate=6, term_years=25, offset_amount=50000))
        self.assertEqual(terms.loan_id, '7')
        self.assertEqual(terms.offset_amount, 50000)
        self.assertEqual(terms.offset_account.rate, 6)
        self.assertEqual(terms.offset_account.term_years, 25)
        self.assertEqual(terms.offset_account.amount, 50000)

    def test_no_offset(self):
        for offset in (0, None):
            terms = map_to_loan_terms(LoanParams(id='1', amount=1000, rate=4, term_years=5, offset_amount=offset))
            self.assertIsNone(terms.offset_account)
            self.assertEqual(terms.offset_amount, 0)


class TestFormatting(unittest.TestCase):
    def test_empty_schedule(self):
        df = schedule_frame([])
        self.assertEqual(format_results(df), {'results': [], 'columns': []})
        self.assertEqual(summarize(df), {'total_principal': 0.0, 'total_interest': 0.0, 'total_paid': 0.0})

    def test_loan_breakdown_columns(self):
        params = MultiLoanParams(loans=[
            {'id': '1', 'amount': 500000, 'rate': 4.5, 'term_years': 30},
            {'id': '2', 'amount': 200000, 'rate': 5, 'term_years': 20},
        ])
        response = run_multi_loan_service(params)
        table = response['yearly_payments']

        self.assertIn('loan_1_principal', table['columns'])
        self.assertIn('loan_2_interest', table['columns'])
        self.assertNotIn('loan_payments', table['columns'])
        self.assertEqual(len(table['results']), 30)
        # Loan 2 has no entry after its term
        self.assertIsNone(table['results'][25]['loan_2_principal'])
        self.assertAlmostEqual(table['results'][0]['loan_2_principal'], 5941.10, places=2)

        self.assertEqual(response['loan_ids'], ['1', '2'])
        self.assertAlmostEqual(response['total_monthly_payment'], 3856.8804544521063, places=6)
        self.assertEqual(set(response['loan_monthly_payments']['1']), {'main', 'extra', 'offset'})
        self.assertAlmostEqual(response['summary']['total_principal'], 700000, delta=0.5)


class TestServices(unittest.TestCase):
    def test_schedule_service(self):
        response = run_schedule_service(PaymentParams(amount=500000, rate=4.5, term_years=30))
        self.assertTrue(response['success'])
        results = response['schedule']['results']
        self.assertEqual(len(results), 30)
        self.assertAlmostEqual(results[0]['principal'], 7993.36, places=2)
        self.assertAlmostEqual(response['summary']['total_principal'], 500000, delta=0.3)
        self.assertAlmostEqual(
            response['summary']['total_paid'],
            response['summary']['total_principal'] + response['summary']['total_interest'],
            delta=0.5,
        )

    def test_comparison_service(self):
        response = run_comparison_service(ComparisonParams(amount=500000, rate=4.5, term_years=30, extra_payment_percent=10))
        self.assertEqual(response['standard_months'], 360)
        self.assertEqual(response['accelerated_months'], 299)
        self.assertEqual(response['months_saved'], 61)
        self.assertEqual(response['years_saved'], 5)
        self.assertEqual(len(response['scenarios']['accelerated']['results']), 25)
        self.assertLess(
            response['summaries']['accelerated']['total_interest'],
            response['summaries']['standard']['total_interest'],
        )
        self.assertIn('main', response['loan_monthly_payments'])

    def test_comparison_with_offset_loan(self):
        params = ComparisonParams(
            amount=500000, rate=4.5, term_years=30,
            offset_account={'amount': 100000, 'term_years': 30, 'rate': 4.5, 'offset_amount': 20000},
        )
        response = run_comparison_service(params)
        self.assertAlmostEqual(response['offset_loan_monthly_payment'], 507.1708470809004, places=6)
        first = response['scenarios']['accelerated']['results'][0]
        self.assertAlmostEqual(first['offset_loan_interest'], 3564.30, places=2)

    def test_zero_amount_loans_are_skipped(self):
        params = MultiLoanParams(loans=[
            {'id': '1', 'amount': 0, 'rate': 4.5, 'term_years': 30},
            {'id': '2', 'amount': 200000, 'rate': 5, 'term_years': 20},
        ])
        response = run_multi_loan_service(params)
        self.assertEqual(response['loan_ids'], ['2'])
        self.assertEqual(list(response['loan_monthly_payments']), ['2'])

    def test_no_calculable_loans(self):
        params = MultiLoanParams(loans=[{'id': '1', 'amount': 0, 'rate': 4.5, 'term_years': 30}])
        with self.assertRaises(ValueError):
            run_multi_loan_service(params)

    def test_export_csv(self):
        params = MultiLoanParams(loans=[{'id': '1', 'amount': 120000, 'rate': 0, 'term_years': 10}])
        df = pd.read_csv(io.StringIO(export_schedule_csv(params)))
        self.assertEqual(len(df), 10)
        self.assertIn('loan_1_principal', df.columns)
        pd.testing.assert_series_equal(df['principal'], pd.Series([12000.0] * 10), check_names=False)


if __name__ == '__main__':
    unittest.main()
