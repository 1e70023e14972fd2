import os
import logging
import logging.config
from pathlib import Path

# Base Paths
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# Logging Setup
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "")

_handlers: dict = {
    "console": {
        "class": "logging.StreamHandler",
        "level": LOG_LEVEL,
        "formatter": "standard",
        "stream": "ext://sys.stdout",
    },
}
if LOG_FILE_PATH:
    Path(LOG_FILE_PATH).parent.mkdir(parents=True, exist_ok=True)
    _handlers["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "level": LOG_LEVEL,
        "formatter": "standard",
        "filename": LOG_FILE_PATH,
        "maxBytes": 10 * 1024 * 1024,  # 10 MB
        "backupCount": 5,
        "encoding": "utf8",
    }

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": LOG_FORMAT,
        }
    },
    "handlers": _handlers,
    "loggers": {
        "tripshare": {
            "handlers": list(_handlers),
            "level": LOG_LEVEL,
            "propagate": False,
        },
        # Let uvicorn log to console using its own handlers
        "uvicorn.error": {"level": "INFO"},
        "uvicorn.access": {"level": "INFO"},
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger("tripshare")


# Firebase
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH", "")

# Firestore collections
PLANS_COLLECTION = os.getenv("PLANS_COLLECTION", "plans")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")

# Maintenance endpoints (memberIds repair) are open unless this is set
REPAIR_REQUIRE_ADMIN = _env_flag("REPAIR_REQUIRE_ADMIN")
ADMIN_CLAIM = "admin"

# Security / domains
ALLOWED_HOSTS = _split_csv(os.getenv("ALLOWED_HOSTS", "*"))

CORS_ORIGINS = _split_csv(
    os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:4173",
    )
)

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"
DEBUG = not IS_PRODUCTION
