import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_FILE = "timers.db"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


class Config:
    """Environment-backed settings. A local .env file is merged in at import time."""

    @staticmethod
    def get_str(key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a string value from the environment"""
        value = os.environ.get(key)
        if value is None or value == "":
            return default
        return value

    @staticmethod
    def get_int(key: str, default: int) -> int:
        """Get an integer value from the environment"""
        value = os.environ.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring non-integer value for %s: %r", key, value)
            return default

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        """Get a boolean value from the environment"""
        value = os.environ.get(key)
        if value is None or value == "":
            return default
        return value.lower() not in ("false", "0", "no", "off")

    @staticmethod
    def db_file() -> str:
        return Config.get_str("COUNTDOWN_DB_FILE", DEFAULT_DB_FILE)

    @staticmethod
    def host() -> str:
        return Config.get_str("COUNTDOWN_HOST", DEFAULT_HOST)

    @staticmethod
    def port() -> int:
        return Config.get_int("COUNTDOWN_PORT", DEFAULT_PORT)

    @staticmethod
    def log_level() -> str:
        return Config.get_str("COUNTDOWN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
