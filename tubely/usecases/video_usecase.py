# tubely/usecases/video_usecase.py
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator, List
from uuid import UUID

from tubely.config import AppConfig
from tubely.helpers.assets import (
    asset_disk_path,
    derive_object_key,
    ensure_assets_dir,
    get_asset_path,
    random_asset_name,
)
from tubely.models.errors import (
    AuthorizationError,
    NotFoundError,
    ProcessingError,
    StorageReferenceError,
    ValidationError,
)
from tubely.models.video import StorageReference, VideoRecord, VideoView
from tubely.processors.faststart import MediaRemuxer, processed_path
from tubely.processors.media_probe import MediaInspector, classify
from tubely.repositories.video_repository import VideoRepository
from tubely.services.object_storage import ObjectStore
from tubely.services.url_signer import AccessUrlIssuer

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


@contextmanager
def scratch_files() -> Iterator[List[str]]:
    """Collects request-scoped temp paths and removes them on exit, success or not"""
    paths: List[str] = []
    try:
        yield paths
    finally:
        for path in paths:
            try:
                os.remove(path)
                logger.debug(f"🧹 Removed temp file: {path}")
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Error removing temp file {path}: {e}")


class VideoUseCase:
    """Video records, thumbnail uploads and the video ingestion pipeline"""

    def __init__(
        self,
        config: AppConfig,
        video_repository: VideoRepository,
        object_store: ObjectStore,
        inspector: MediaInspector,
        remuxer: MediaRemuxer,
        url_issuer: AccessUrlIssuer,
    ):
        self.config = config
        self.video_repo = video_repository
        self.object_store = object_store
        self.inspector = inspector
        self.remuxer = remuxer
        self.url_issuer = url_issuer

    # -- records -----------------------------------------------------------

    def get_record(self, video_id: UUID) -> VideoRecord:
        video = self.video_repo.get_video(video_id)
        if video is None:
            raise NotFoundError("Video not found")
        return video

    def get_owned_record(self, video_id: UUID, user_id: UUID) -> VideoRecord:
        """Load a record and check the caller owns it.

        A missing record is reported as 404 before ownership is checked.
        """
        video = self.get_record(video_id)
        if video.user_id != user_id:
            raise AuthorizationError("User is not the owner of the video")
        return video

    def create_video(self, user_id: UUID, title: str, description: str = "") -> VideoView:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        video = self.video_repo.create_video(
            VideoRecord(user_id=user_id, title=title.strip(), description=description or "")
        )
        logger.info(f"Created video {video.id} for user {user_id}")
        return self.url_issuer.sign_video(video)

    def get_video(self, video_id: UUID) -> VideoView:
        return self.url_issuer.sign_video(self.get_record(video_id))

    def list_videos(self, user_id: UUID) -> List[VideoView]:
        """List a user's videos; a record with a malformed reference is listed unsigned"""
        views = []
        for video in self.video_repo.list_videos_for_user(user_id):
            try:
                views.append(self.url_issuer.sign_video(video))
            except StorageReferenceError as e:
                logger.error(f"Video {video.id} has a malformed storage reference: {e}")
                views.append(VideoView.from_record(video))
        return views

    def delete_video(self, video_id: UUID, user_id: UUID) -> None:
        self.get_owned_record(video_id, user_id)
        if not self.video_repo.delete_video(video_id):
            raise NotFoundError("Video not found")
        logger.info(f"Deleted video {video_id}")

    # -- thumbnails --------------------------------------------------------

    def upload_thumbnail(self, video: VideoRecord, file: BinaryIO, media_type: str) -> VideoView:
        """Store a thumbnail under the assets root and point the record at it"""
        if media_type not in self.config.media.thumbnail_media_types:
            raise ValidationError("Only accept PNG and JPEG")

        assets_root = self.config.storage.assets_root
        ensure_assets_dir(assets_root)
        asset_path = get_asset_path(random_asset_name(), media_type)
        try:
            with open(asset_disk_path(assets_root, asset_path), "wb") as dst:
                shutil.copyfileobj(file, dst, COPY_BUFFER_SIZE)
        except OSError as e:
            raise ProcessingError("Couldn't write file", e) from e

        video = self.video_repo.update_video(video.with_thumbnail(self.config.asset_url(asset_path)))
        logger.info(f"🖼️ Thumbnail for video {video.id} stored at {asset_path}")
        return self.url_issuer.sign_video(video)

    # -- video ingestion ---------------------------------------------------

    def check_video_media_type(self, media_type: str) -> None:
        if media_type != self.config.media.video_media_type:
            raise ValidationError("Only accept MP4 file")

    def upload_video(self, video: VideoRecord, file: BinaryIO, media_type: str) -> VideoView:
        """Ingest an uploaded video for an already authorized record.

        received -> classified -> normalized -> uploaded -> persisted -> signed.
        The record is written only after the object store accepted the file;
        any earlier failure leaves it untouched. Both temp files are removed
        before returning.
        """
        self.check_video_media_type(media_type)
        bucket = self.config.storage.bucket

        with scratch_files() as scratch:
            raw_path = self._receive(file, scratch)

            orientation = classify(self.inspector, raw_path)

            # ffmpeg may leave a partial output behind when it fails
            scratch.append(processed_path(raw_path))
            processed = self.remuxer.remux(raw_path)
            if processed not in scratch:
                scratch.append(processed)

            key = derive_object_key(orientation, media_type)
            try:
                with open(processed, "rb") as body:
                    self.object_store.put_object(bucket, key, body, media_type)
            except OSError as e:
                raise ProcessingError("Couldn't read processed video", e) from e

        video = self.video_repo.update_video(video.with_video(StorageReference(bucket, key)))
        logger.info(f"✅ Video {video.id} stored as {bucket}/{key}")
        return self.url_issuer.sign_video(video)

    def _receive(self, file: BinaryIO, scratch: List[str]) -> str:
        """Copy the upload to a local temp file and return its path"""
        temp_dir = self.config.media.temp_dir or None
        try:
            fd, path = tempfile.mkstemp(prefix="tubely-video-", suffix=".mp4", dir=temp_dir)
            scratch.append(path)
            with os.fdopen(fd, "wb") as dst:
                shutil.copyfileobj(file, dst, COPY_BUFFER_SIZE)
        except OSError as e:
            raise ProcessingError("Couldn't write file", e) from e
        return path
