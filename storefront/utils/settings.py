# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", 24*60*60))
CATALOG_CACHE_TTL_SECONDS = int(os.getenv("CATALOG_CACHE_TTL_SECONDS", 60*60))
SUBMIT_LOCK_TTL_SECONDS = int(os.getenv("SUBMIT_LOCK_TTL_SECONDS", 30))

STORE_SETTINGS_ROW_ID = os.getenv("STORE_SETTINGS_ROW_ID", "default")
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "change-me")
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "")
WHATSAPP_BASE_URL = os.getenv("WHATSAPP_BASE_URL", "https://wa.me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
