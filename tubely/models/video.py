# tubely/models/video.py
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from tubely.models.errors import StorageReferenceError

REFERENCE_DELIMITER = ","


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Orientation(str, Enum):
    """Aspect category of a video; the value doubles as the key directory"""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    OTHER = "other"

    @property
    def directory(self) -> str:
        return self.value


@dataclass(frozen=True)
class StorageReference:
    """Location of an uploaded video in the object store"""
    bucket: str
    key: str

    def encode(self) -> str:
        """Serialize as '<bucket>,<key>' for persistence"""
        return f"{self.bucket}{REFERENCE_DELIMITER}{self.key}"

    @classmethod
    def parse(cls, value: str) -> 'StorageReference':
        """Parse a persisted reference.

        Raises:
            StorageReferenceError: value does not contain exactly one delimiter
        """
        parts = value.split(REFERENCE_DELIMITER)
        if len(parts) != 2:
            raise StorageReferenceError("VideoURL should have text in format '<bucket>,<key>'")
        return cls(bucket=parts[0], key=parts[1])


@dataclass
class VideoRecord:
    """Video metadata record owned by a single user"""
    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    title: str = ""
    description: str = ""
    thumbnail_url: Optional[str] = None
    video_ref: Optional[str] = None  # persisted '<bucket>,<key>', None until the first successful upload
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def video(self) -> Optional[StorageReference]:
        """Parsed storage reference, None before the first upload.

        Raises:
            StorageReferenceError: the stored value is malformed
        """
        if self.video_ref is None:
            return None
        return StorageReference.parse(self.video_ref)

    def with_video(self, reference: StorageReference) -> 'VideoRecord':
        return replace(self, video_ref=reference.encode(), updated_at=utcnow())

    def with_thumbnail(self, thumbnail_url: str) -> 'VideoRecord':
        return replace(self, thumbnail_url=thumbnail_url, updated_at=utcnow())


@dataclass
class VideoView:
    """Video record as returned to clients"""
    id: UUID
    user_id: UUID
    title: str
    description: str
    thumbnail_url: Optional[str]
    video_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: VideoRecord, video_url: Optional[str] = None) -> 'VideoView':
        return cls(
            id=record.id,
            user_id=record.user_id,
            title=record.title,
            description=record.description,
            thumbnail_url=record.thumbnail_url,
            video_url=video_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
