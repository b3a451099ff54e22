import os
import warnings
from dotenv import load_dotenv

load_dotenv()

# REST backend that owns orders, products and inquiries
UPSTREAM_API_URL = os.getenv("UPSTREAM_API_URL", "http://localhost:3030/api").rstrip("/")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "10.0"))

_JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
if not _JWT_SECRET_KEY:
    warnings.warn(
        "JWT_SECRET_KEY is not set. Using an insecure default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    _JWT_SECRET_KEY = "insecure-default-change-me"

JWT_SECRET_KEY: str = _JWT_SECRET_KEY
SESSION_TOKEN_EXPIRE_MINUTES = int(os.getenv("SESSION_TOKEN_EXPIRE_MINUTES", "60"))

# Observability
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "true").lower() in ("1", "true", "yes")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")

# Storefront
STOREFRONT_PRODUCT = os.getenv("STOREFRONT_PRODUCT", "herbal-cream")
STOREFRONT_RATE_LIMIT = os.getenv("STOREFRONT_RATE_LIMIT", "10/minute")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() in ("1", "true", "yes")

# Listing
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
PAGE_SIZE_CHOICES = (5, 10, 15, 20)

# Display-layer fallbacks. The catalog price is authoritative when known.
UNIT_PRICE_FALLBACK = int(os.getenv("UNIT_PRICE_FALLBACK", "1500"))
DELIVERY_CHARGE_FALLBACK = int(os.getenv("DELIVERY_CHARGE_FALLBACK", "200"))
CURRENCY_PREFIX = os.getenv("CURRENCY_PREFIX", "Rs.")
