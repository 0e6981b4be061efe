"""
Service settings, read from the environment at import time.
"""
import os

API_HOST = os.environ.get('MORTGAGE_API_HOST', '0.0.0.0')
API_PORT = int(os.environ.get('MORTGAGE_API_PORT', '5001'))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get('MORTGAGE_CORS_ORIGINS', '*').split(',')
    if origin.strip()
]
LOG_LEVEL = os.environ.get('MORTGAGE_LOG_LEVEL', 'INFO').upper()

# Input limits applied by the request schemas
MAX_LOANS = int(os.environ.get('MORTGAGE_MAX_LOANS', '10'))
MAX_EXTRA_PAYMENT_PERCENT = 20
MAX_TERM_YEARS = 50
