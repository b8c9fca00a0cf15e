# tubely/services/object_storage.py
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from tubely.config.storage import StorageConfig
from tubely.models.errors import IssuanceError, UploadError

logger = logging.getLogger(__name__)


class ObjectStore(ABC):
    """Minimal object store contract used by the ingestion pipeline"""

    @abstractmethod
    def put_object(self, bucket: str, key: str, body: BinaryIO, content_type: str) -> None:
        pass

    @abstractmethod
    def presign_get(self, bucket: str, key: str, expires_in: int) -> str:
        pass


class S3ObjectStore(ObjectStore):
    """boto3-backed store; one client shared across requests"""

    def __init__(self, config: StorageConfig, client=None):
        self.config = config
        self.s3 = client or boto3.client(
            's3',
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            config=BotoConfig(signature_version='s3v4'),
        )

    def put_object(self, bucket: str, key: str, body: BinaryIO, content_type: str) -> None:
        """Single PutObject attempt; no retry, no partial cleanup"""
        try:
            self.s3.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Upload to s3://{bucket}/{key} failed: {e}")
            raise UploadError("Upload to s3 failed", e) from e
        logger.info(f"📤 Uploaded s3://{bucket}/{key} ({content_type})")

    def presign_get(self, bucket: str, key: str, expires_in: int) -> str:
        try:
            return self.s3.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise IssuanceError("Presign get object failed", e) from e
