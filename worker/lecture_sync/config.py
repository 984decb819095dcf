import os

DRIVE_FOLDER_ID = os.environ.get("DRIVE_FOLDER_ID", "")
SOURCE_PROVIDER = os.environ.get("SOURCE_PROVIDER", "drive")
LOCAL_SOURCE_ROOT = os.environ.get("LOCAL_SOURCE_ROOT", "./lectures")
GOOGLE_SERVICE_ACCOUNT_JSON = os.environ.get("GOOGLE_SERVICE_ACCOUNT_JSON", "")

DATABASE_URL = os.environ.get("DATABASE_URL", "postgresql://localhost:5432/lectures")

SUMMARIZER_PROVIDER = os.environ.get("SUMMARIZER_PROVIDER", "groq")
SUMMARIZER_MODEL = os.environ.get("SUMMARIZER_MODEL", "llama-3.3-70b-versatile")
SUMMARIZER_TIMEOUT = float(os.environ.get("SUMMARIZER_TIMEOUT", "60"))

GROQ_API_KEY = os.environ.get("GROQ_API_KEY", "")
GROQ_URL = os.environ.get("GROQ_URL", "https://api.groq.com/openai/v1")
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_URL = os.environ.get("OPENAI_URL", "https://api.openai.com/v1")
OLLAMA_URL = os.environ.get("OLLAMA_URL", "http://localhost:11434")

DELAY_BETWEEN_FILES = float(os.environ.get("DELAY_BETWEEN_FILES", "3"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Rate-limit retry schedule for the completion endpoint
MAX_ATTEMPTS = 3
RATE_LIMIT_DEFAULT_WAIT = 15.0
RATE_LIMIT_MARGIN = 1.0

SUMMARY_TEMPERATURE = 0.6
SUMMARY_MAX_TOKENS = 2048

# Text length bounds (characters)
MAX_EXTRACTED_CHARS = 15000
MIN_EXTRACTED_CHARS = 30
MAX_SUMMARIZER_INPUT_CHARS = 10000
MIN_SUMMARIZER_INPUT_CHARS = 20
MAX_SUMMARY_CHARS = 3500

# Key for the Postgres advisory lock that keeps sync runs single-flight
SYNC_LOCK_KEY = int(os.environ.get("SYNC_LOCK_KEY", "727162"))

if SOURCE_PROVIDER not in ("drive", "local"):
    raise RuntimeError(
        f"SOURCE_PROVIDER must be 'drive' or 'local', got {SOURCE_PROVIDER!r}"
    )
