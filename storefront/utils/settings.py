# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

STOREFRONT_API_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:5000")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))
HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 3))
RECONCILER_WORKERS = int(os.getenv("RECONCILER_WORKERS", 8))
SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR", "").strip()
