# tubely/config/__init__.py
from .settings import AppConfig
from .database import DatabaseConfig, PostgresConfig
from .storage import StorageConfig
from .media import MediaConfig
from .auth import AuthConfig

__all__ = [
    'AppConfig',
    'DatabaseConfig',
    'PostgresConfig',
    'StorageConfig',
    'MediaConfig',
    'AuthConfig',
]
