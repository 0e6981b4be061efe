from typing import Annotated, List, Optional
from pydantic import BaseModel, BeforeValidator, Field, field_validator

import config


def clamp_extra_payment_percent(value):
    """Blank input means no extra; anything else is forced into [0, 20]."""
    if value is None or value == '':
        return 0.0
    return min(max(float(value), 0.0), config.MAX_EXTRA_PAYMENT_PERCENT)


ExtraPaymentPercent = Annotated[float, BeforeValidator(clamp_extra_payment_percent)]


class PaymentParams(BaseModel):
    """Loan basics shared by every calculation"""
    amount: float = Field(ge=0)
    rate: float = Field(ge=0, le=100)
    term_years: int = Field(ge=1, le=config.MAX_TERM_YEARS)


class OffsetAccountParams(BaseModel):
    """Separate offset loan for the accelerated comparison"""
    amount: float = Field(ge=0)
    term_years: int = Field(ge=1, le=config.MAX_TERM_YEARS)
    rate: float = Field(ge=0, le=100)
    offset_amount: float = Field(ge=0, default=0)


class ComparisonParams(PaymentParams):
    """Standard vs accelerated repayment of one loan"""
    extra_payment_percent: ExtraPaymentPercent = 0
    offset_account: Optional[OffsetAccountParams] = None


class LoanParams(PaymentParams):
    """One loan of a multi-loan calculation"""
    id: str = Field(min_length=1)
    extra_payment_percent: ExtraPaymentPercent = 0
    offset_amount: Optional[float] = Field(ge=0, default=0)


class MultiLoanParams(BaseModel):
    loans: List[LoanParams] = Field(min_length=1, max_length=config.MAX_LOANS)

    @field_validator('loans')
    @classmethod
    def unique_ids(cls, loans):
        ids = [loan.id for loan in loans]
        if len(ids) != len(set(ids)):
            raise ValueError('loan ids must be unique')
        return loans
