"""
Environment configuration for the assessment service
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


MONGODB_URI = os.getenv("MONGODB_URI", "")
DB_NAME = os.getenv("DB_NAME", "wellness")

# When false, "overall" no longer repeats questions of concrete categories
# that were also selected.
ALLOW_OVERLAP_COUNTING = _env_flag("ALLOW_OVERLAP_COUNTING", True)

QUESTION_BANK_VERSION = os.getenv("QUESTION_BANK_VERSION", "v1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
NEXT_ASSESSMENT_DAYS = int(os.getenv("NEXT_ASSESSMENT_DAYS", "30"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "50"))
