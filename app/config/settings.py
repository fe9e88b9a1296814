import os
from dotenv import load_dotenv

load_dotenv()

LAPTOP_API_BASE_URL = os.getenv("LAPTOP_API_BASE_URL", "http://localhost:8080")
LAPTOP_ENDPOINT = "/api/laptop/{laptop_id}"
# empty -> no timeout
_timeout = os.getenv("LAPTOP_FETCH_TIMEOUT_SEC", "").strip()
LAPTOP_FETCH_TIMEOUT_SEC = float(_timeout) if _timeout else None
COMPARE_STATE_DIR = os.getenv("COMPARE_STATE_DIR", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
