import os
from dotenv import load_dotenv

load_dotenv()

# Supabase Configuration
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY")

# App Configuration
APP_NAME = "AgroConnect - Agricultural Marketplace"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "AgroConnect - Soko la mazao (Crop marketplace for Tanzania)"
DEBUG = os.getenv("DEBUG", "true").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Cart & Checkout
CURRENCY = "TZS"
DELIVERY_FEE = float(os.getenv("DELIVERY_FEE", "4500"))
ESTIMATED_DELIVERY_MINUTES = 30
CHECKOUT_DELAY_SECONDS = float(os.getenv("CHECKOUT_DELAY_SECONDS", "2"))
CHECKOUT_MAX_ATTEMPTS = int(os.getenv("CHECKOUT_MAX_ATTEMPTS", "3"))
CHECKOUT_BACKOFF_SECONDS = float(os.getenv("CHECKOUT_BACKOFF_SECONDS", "0.5"))
DEFAULT_BUYER_ID = os.getenv("DEFAULT_BUYER_ID", "user-123")
ORDERS_REDIRECT_PATH = "/my-orders"

# "local" simulates the backend call, "supabase" writes orders to Supabase
ORDER_BACKEND = os.getenv("ORDER_BACKEND", "local").lower()

# Order lifecycle
SIMULATOR_ENABLED = os.getenv("SIMULATOR_ENABLED", "true").lower() == "true"
SIMULATOR_TICK_SECONDS = float(os.getenv("SIMULATOR_TICK_SECONDS", "15"))
IN_TRANSIT_AFTER_SECONDS = 15
DELIVERED_AFTER_SECONDS = 30

# Rate limits: (max requests, window in seconds)
CHECKOUT_RATE_LIMIT = (5, 60)
CART_RATE_LIMIT = (60, 60)

# SMS gateway
SMS_API_KEY = os.getenv("SMS_API_KEY", "")
SMS_API_URL = os.getenv("SMS_API_URL", "https://api.sms.co.tz/api/sendsms")
