import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from schemas.mortgage import PaymentParams, ComparisonParams, MultiLoanParams
from services.mortgage_service import (
    export_schedule_csv,
    run_comparison_service,
    run_monthly_payment_service,
    run_multi_loan_service,
    run_schedule_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/monthly-payment")
async def monthly_payment_endpoint(params: PaymentParams):
    """
    Fixed monthly payment for one loan.
    """
    return run_monthly_payment_service(params)


@router.post("/yearly-schedule")
async def yearly_schedule_endpoint(params: PaymentParams):
    """
    Standard yearly principal/interest schedule for one loan.
    """
    try:
        return run_schedule_service(params)
    except Exception as e:
        logger.exception("Schedule calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/compare")
async def compare_endpoint(params: ComparisonParams):
    """
    Compare standard repayment with extra payments and/or an offset loan.
    """
    try:
        return run_comparison_service(params)
    except Exception as e:
        logger.exception("Comparison failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/calculate")
async def calculate_endpoint(params: MultiLoanParams):
    """
    Combined yearly schedule for several loans with a per-loan breakdown.
    """
    try:
        return run_multi_loan_service(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Multi-loan calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/export-schedule")
async def export_schedule_endpoint(params: MultiLoanParams):
    """Export the combined yearly schedule as a CSV file"""
    try:
        csv_text = export_schedule_csv(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return StreamingResponse(
        iter([csv_text]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=mortgage_schedule.csv"}
    )
