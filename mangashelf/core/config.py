import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = Path(os.getenv("MANGASHELF_DATA_DIR", BASE_DIR / "data"))
DB_PATH = Path(os.getenv("MANGASHELF_DB_PATH", DATA_DIR / "mangashelf.db"))

# proxied url is PROXY_BASE + quoted target; empty string fetches directly
PROXY_BASE = os.getenv("MANGASHELF_PROXY_BASE", "https://corsproxy.io/?")
REQUEST_TIMEOUT = float(os.getenv("MANGASHELF_REQUEST_TIMEOUT", "20"))
PROXY_RETRIES = int(os.getenv("MANGASHELF_PROXY_RETRIES", "2"))
RETRY_BACKOFF = 1.0
MAX_RETRY_AFTER = 30
REQUEST_DELAY = float(os.getenv("MANGASHELF_REQUEST_DELAY", "0.2"))

MIN_IMAGE_SIZE = int(os.getenv("MANGASHELF_MIN_IMAGE_SIZE", "200"))
BLOCKLIST_PATTERN = os.getenv("MANGASHELF_BLOCKLIST", "ad|banner|thumb|logo")

FALLBACK_TO_GENERIC = os.getenv("MANGASHELF_FALLBACK_TO_GENERIC", "1").lower() not in {"0", "false", "no"}

LOG_LEVEL = os.getenv("MANGASHELF_LOG_LEVEL", "INFO")
