"""
Mortgage Repayment Planner - FastAPI Backend
Features:
- Daily-compounded monthly payments
- Yearly principal/interest schedules
- Extra repayments and offset accounts with payoff comparison
- Multiple loans with per-loan breakdown
- CSV schedule export
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.mortgages import router as mortgage_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Mortgage Planner API",
    description="Mortgage repayment schedules with daily compounding, extra payments and offset accounts",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mortgage_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment"""
    return {"status": "healthy", "service": "mortgage-planner-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=config.API_HOST, port=config.API_PORT, reload=True)
