import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Values stay raw strings here; they are converted and validated when a run
# is configured, so a bad value is reported instead of failing the import.

APP_NAME = "check_api"
VERSION = "2017-02-16"

# Default User-Agent sent when the caller does not supply one
USER_AGENT = os.getenv("APICHECK_USER_AGENT", "ApiCheck/1.0")

# Indent unit used by the verbose tree dump
INDENT = "  "

# Timing Parameters (seconds, fractions allowed)
DEFAULT_TIMEOUT = os.getenv("APICHECK_TIMEOUT", "30.0")
DEFAULT_WARNING = os.getenv("APICHECK_WARNING", "10.0")
DEFAULT_CRITICAL = os.getenv("APICHECK_CRITICAL", "15.0")

# Logging Parameters
LOG_LEVEL = os.getenv("APICHECK_LOG_LEVEL", "error")
LOG_FILE = os.getenv("APICHECK_LOG_FILE")
LOG_FILE_MAX_BYTES = os.getenv("APICHECK_LOG_FILE_MAX_BYTES", "10485760")  # 10MB per file
LOG_FILE_BACKUP_COUNT = os.getenv("APICHECK_LOG_FILE_BACKUP_COUNT", "5")
