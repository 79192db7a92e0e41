"""
Base configuration for oracle-probe.

Every setting is a dataclass field whose default is read from the process
environment (or a local .env file) when this module is imported, so
constructor arguments override the environment.
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("local", "dev", "staging", "production", "test")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

T = TypeVar("T")


class ConfigError(Exception):
    """Raised when a setting is missing or malformed."""
    pass


@dataclass
class BaseConfig:
    """Settings shared by the chain and market sections."""

    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        self._setup_logging()
        self._validate_config()

    def _setup_logging(self):
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        if not isinstance(level, int):
            raise ConfigError(f"Invalid log level: {self.LOG_LEVEL}")

        logging.basicConfig(level=level, format=LOG_FORMAT)

    def _validate_config(self):
        """Checked after every construction; subclasses extend this."""
        if self.ENVIRONMENT not in ENVIRONMENTS:
            raise ConfigError(f"Invalid environment: {self.ENVIRONMENT}")

    @staticmethod
    def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(key, default)

    @staticmethod
    def _get_typed(key: str, default: Optional[T], cast: Callable[[str], T], kind: str) -> T:
        raw = os.getenv(key)
        if raw is None:
            if default is None:
                raise ConfigError(f"Required environment variable '{key}' is not set")
            return default

        try:
            return cast(raw)
        except ValueError:
            raise ConfigError(f"Environment variable '{key}' must be {kind}, got: {raw}")

    @staticmethod
    def get_env_int(key: str, default: Optional[int] = None) -> int:
        return BaseConfig._get_typed(key, default, int, "an integer")

    @staticmethod
    def get_env_float(key: str, default: Optional[float] = None) -> float:
        return BaseConfig._get_typed(key, default, float, "a float")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
