import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

# JSON object of {currency_code: rate_per_usd}, merged over the static table
EXCHANGE_RATES_FILE = os.getenv("EXCHANGE_RATES_FILE")

SENTRY_DSN = os.getenv("SENTRY_DSN")
