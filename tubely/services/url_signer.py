# tubely/services/url_signer.py
import logging
from datetime import timedelta
from typing import Optional

from tubely.models.errors import IssuanceError, TubelyError
from tubely.models.video import StorageReference, VideoRecord, VideoView
from tubely.services.object_storage import ObjectStore

logger = logging.getLogger(__name__)

VIDEO_URL_TTL = timedelta(minutes=10)


class AccessUrlIssuer:
    """Turns stored video references into time-limited presigned URLs.

    Stateless: nothing is cached and every call signs afresh, so expiry is
    enforced only by the store's signature check.
    """

    def __init__(self, store: ObjectStore, ttl: timedelta = VIDEO_URL_TTL):
        self.store = store
        self.ttl = ttl

    def issue(self, bucket: str, key: str, ttl: Optional[timedelta] = None) -> str:
        expires = ttl if ttl is not None else self.ttl
        seconds = int(expires.total_seconds())
        if not bucket or not key or seconds <= 0:
            raise IssuanceError("Couldn't generate presigned url",
                                ValueError(f"bucket={bucket!r} key={key!r} ttl={seconds}s"))
        try:
            return self.store.presign_get(bucket, key, seconds)
        except IssuanceError:
            raise
        except TubelyError as e:
            raise IssuanceError("Couldn't generate presigned url", e) from e

    def issue_for(self, reference: StorageReference) -> str:
        return self.issue(reference.bucket, reference.key)

    def sign_video(self, record: VideoRecord) -> VideoView:
        """Render a record for clients, signing its video reference if present"""
        reference = record.video
        if reference is None:
            return VideoView.from_record(record)
        return VideoView.from_record(record, self.issue_for(reference))
