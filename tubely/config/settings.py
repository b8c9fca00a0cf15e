# tubely/config/settings.py
from dataclasses import dataclass
import logging
import os
from typing import List
from .base import BaseConfig
from .database import DatabaseConfig
from .storage import StorageConfig
from .media import MediaConfig
from .auth import AuthConfig

logger = logging.getLogger(__name__)


@dataclass
class AppConfig(BaseConfig):
    """Main application configuration"""
    # Application settings
    platform: str = "dev"
    host: str = "0.0.0.0"
    port: int = 8091
    log_level: str = "INFO"
    debug: bool = False

    # Component configurations
    database: DatabaseConfig = None
    storage: StorageConfig = None
    media: MediaConfig = None
    auth: AuthConfig = None

    def __post_init__(self):
        if self.database is None:
            self.database = DatabaseConfig.from_env()
        if self.storage is None:
            self.storage = StorageConfig.from_env()
        if self.media is None:
            self.media = MediaConfig.from_env()
        if self.auth is None:
            self.auth = AuthConfig.from_env()

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create complete configuration from environment variables"""
        return cls(
            platform=cls.get_env_str('PLATFORM', "dev"),
            host=cls.get_env_str('HOST', "0.0.0.0"),
            port=cls.get_env_int('PORT', 8091),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            debug=cls.get_env_bool('DEBUG', False),
            database=DatabaseConfig.from_env(),
            storage=StorageConfig.from_env(),
            media=MediaConfig.from_env(),
            auth=AuthConfig.from_env(),
        )

    def asset_url(self, asset_path: str) -> str:
        """URL under which a locally stored thumbnail is served"""
        return f"http://localhost:{self.port}/assets/{asset_path}"

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty when valid)"""
        errors = []

        if not self.auth.jwt_secret:
            errors.append("JWT_SECRET environment variable is not set")
        if not self.storage.bucket:
            errors.append("S3_BUCKET environment variable is not set")
        if not self.storage.region:
            errors.append("S3_REGION environment variable is not set")
        if not self.storage.assets_root:
            errors.append("ASSETS_ROOT environment variable is not set")
        if not self.database.url and not self.database.postgres.db_host:
            errors.append("Database configuration incomplete")
        if self.media.max_video_upload_bytes <= 0:
            errors.append("MAX_VIDEO_UPLOAD_BYTES must be positive")
        if self.media.video_url_ttl_seconds <= 0:
            errors.append("VIDEO_URL_TTL_SECONDS must be positive")

        for error in errors:
            logger.error(f"Configuration error: {error}")
        return errors
