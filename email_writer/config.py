"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent
DATA_DIR = Path(os.getenv("EMAIL_WRITER_DATA_DIR", "") or PROJECT_ROOT / "data")
LOCAL_STORAGE_PATH = DATA_DIR / "local_storage.json"
TEMPLATES_CONFIG_PATH = PACKAGE_DIR / "catalog.yaml"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)

# LLM provider (OpenAI-compatible chat completions; Groq by default)
LLM_API_KEY = os.getenv("LLM_API_KEY", "") or os.getenv("GROQ_API_KEY", "")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1").rstrip("/")
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.1-70b-versatile")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2000"))
# 0 = no timeout
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "0")) or None

# Local proxy
PROXY_HOST = os.getenv("PROXY_HOST", "127.0.0.1")
PROXY_PORT = int(os.getenv("PROXY_PORT", "8000"))
PROXY_URL = os.getenv("PROXY_URL", f"http://{PROXY_HOST}:{PROXY_PORT}").rstrip("/")

# History (0 = unbounded)
HISTORY_MAX_ITEMS = int(os.getenv("HISTORY_MAX_ITEMS", "0"))

# Logging
LOG_DIR = DATA_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)
