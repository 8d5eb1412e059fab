from dotenv import load_dotenv
from pathlib import Path
import os

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB
MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("DB_NAME", "orders_app")
ORDERS_COLLECTION = os.environ.get("ORDERS_COLLECTION", "orders")

# HTTP
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Analytics uses local wall-clock dates in this zone
TIMEZONE = os.environ.get("TIMEZONE", "Africa/Cairo")

# Product / pricing
UNIT_PRICE = int(os.environ.get("UNIT_PRICE", "350"))
CURRENCY = os.environ.get("CURRENCY", "جنيه")
PRODUCT_NAME = os.environ.get("PRODUCT_NAME", "سيروم كيكه من سندرين بيوتي")
WHATSAPP_NUMBER = os.environ.get("WHATSAPP_NUMBER", "201000000000")

# Rate limiting (fixed window)
RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "900"))
RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "100"))
