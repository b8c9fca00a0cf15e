# tubely/config/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
import os
from typing import Optional


@dataclass
class BaseConfig(ABC):
    """Base configuration class with environment helpers"""

    @classmethod
    @abstractmethod
    def from_env(cls) -> 'BaseConfig':
        """Create configuration from environment variables"""
        pass

    @staticmethod
    def get_env_str(key: str, default: str = "") -> str:
        """Get string value from environment variable, treating blank as unset"""
        value = os.getenv(key)
        if value is None or value.strip() == "":
            return default
        return value.strip()

    @staticmethod
    def get_env_optional(key: str) -> Optional[str]:
        """Get string value from environment variable or None"""
        value = os.getenv(key)
        if value is None or value.strip() == "":
            return None
        return value.strip()

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        """Get boolean value from environment variable"""
        return os.getenv(key, str(default)).lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def get_env_int(key: str, default: int) -> int:
        """Get integer value from environment variable"""
        return int(os.getenv(key, str(default)))
