# tubely/repositories/video_repository.py
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID
from tubely.models.video import VideoRecord


class VideoRepository(ABC):
    @abstractmethod
    def get_video(self, video_id: UUID) -> Optional[VideoRecord]:
        pass

    @abstractmethod
    def list_videos_for_user(self, user_id: UUID) -> List[VideoRecord]:
        pass

    @abstractmethod
    def create_video(self, video: VideoRecord) -> VideoRecord:
        pass

    @abstractmethod
    def update_video(self, video: VideoRecord) -> VideoRecord:
        pass

    @abstractmethod
    def delete_video(self, video_id: UUID) -> bool:
        pass
