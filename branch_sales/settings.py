import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Data Sources ---
# Either a local directory or an http(s):// base URL holding the branch documents.
DATA_SOURCE_BASE = os.getenv("DATA_SOURCE_BASE", str(BASE_DIR / "api"))

# The three branches are fixed. Order here is the order they are fetched and flattened.
BRANCH_SOURCES = {
    "branch1": "branch1.json",
    "branch2": "branch2.json",
    "branch3": "branch3.json",
}

# No timeout unless one is explicitly configured; a hung source keeps the view loading.
_timeout = os.getenv("REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None

# --- Locale ---
NUMBER_LOCALE = "en"

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
