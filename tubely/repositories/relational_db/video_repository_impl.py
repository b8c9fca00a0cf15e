# tubely/repositories/relational_db/video_repository_impl.py
from typing import Callable, List, Optional
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tubely.db.models import VideoModel
from tubely.models.errors import PersistenceError
from tubely.models.video import VideoRecord
from tubely.repositories.video_repository import VideoRepository
import logging

logger = logging.getLogger(__name__)


class VideoRepositoryImpl(VideoRepository):
    """SQLAlchemy-backed video store; one short session per call"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_video(self, video_id: UUID) -> Optional[VideoRecord]:
        try:
            with self.session_factory() as session:
                model = session.get(VideoModel, video_id)
                return self._to_domain(model) if model else None
        except SQLAlchemyError as e:
            logger.error(f"Error getting video {video_id}: {e}")
            raise PersistenceError("Couldn't get video", e) from e

    def list_videos_for_user(self, user_id: UUID) -> List[VideoRecord]:
        try:
            with self.session_factory() as session:
                models = (
                    session.query(VideoModel)
                    .filter_by(user_id=user_id)
                    .order_by(VideoModel.created_at.desc())
                    .all()
                )
                return [self._to_domain(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Error listing videos for user {user_id}: {e}")
            raise PersistenceError("Couldn't retrieve videos", e) from e

    def create_video(self, video: VideoRecord) -> VideoRecord:
        try:
            with self.session_factory() as session:
                model = VideoModel(
                    id=video.id,
                    user_id=video.user_id,
                    title=video.title,
                    description=video.description,
                    thumbnail_url=video.thumbnail_url,
                    video_url=video.video_ref,
                    created_at=video.created_at,
                    updated_at=video.updated_at,
                )
                session.add(model)
                session.commit()
                session.refresh(model)
                return self._to_domain(model)
        except SQLAlchemyError as e:
            logger.error(f"Error creating video: {e}")
            raise PersistenceError("Couldn't create video", e) from e

    def update_video(self, video: VideoRecord) -> VideoRecord:
        try:
            with self.session_factory() as session:
                model = session.get(VideoModel, video.id)
                if model is None:
                    raise PersistenceError(f"Video with ID {video.id} not found")

                model.title = video.title
                model.description = video.description
                model.thumbnail_url = video.thumbnail_url
                model.video_url = video.video_ref
                model.updated_at = video.updated_at

                session.commit()
                session.refresh(model)
                return self._to_domain(model)
        except SQLAlchemyError as e:
            logger.error(f"Error updating video {video.id}: {e}")
            raise PersistenceError("Couldn't update video", e) from e

    def delete_video(self, video_id: UUID) -> bool:
        try:
            with self.session_factory() as session:
                model = session.get(VideoModel, video_id)
                if model is None:
                    return False
                session.delete(model)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting video {video_id}: {e}")
            raise PersistenceError("Couldn't delete video", e) from e

    def _to_domain(self, model: VideoModel) -> VideoRecord:
        """Convert SQLAlchemy model to domain model"""
        return VideoRecord(
            id=model.id,
            user_id=model.user_id,
            title=model.title or "",
            description=model.description or "",
            thumbnail_url=model.thumbnail_url,
            video_ref=model.video_url,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
