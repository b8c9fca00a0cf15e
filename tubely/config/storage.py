# tubely/config/storage.py
from dataclasses import dataclass
from typing import Optional
from .base import BaseConfig


@dataclass
class StorageConfig(BaseConfig):
    """Object store (S3) and local asset configuration"""
    bucket: str = ""
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    assets_root: str = "assets"
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'StorageConfig':
        return cls(
            bucket=cls.get_env_str('S3_BUCKET', ""),
            region=cls.get_env_str('S3_REGION', "us-east-1"),
            endpoint_url=cls.get_env_optional('S3_ENDPOINT_URL'),
            assets_root=cls.get_env_str('ASSETS_ROOT', "assets"),
            access_key_id=cls.get_env_optional('AWS_ACCESS_KEY_ID'),
            secret_access_key=cls.get_env_optional('AWS_SECRET_ACCESS_KEY'),
        )
