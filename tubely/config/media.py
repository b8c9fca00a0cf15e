# tubely/config/media.py
from dataclasses import dataclass, field
from typing import List
from .base import BaseConfig


@dataclass
class MediaConfig(BaseConfig):
    """Video/thumbnail ingestion settings"""
    ffprobe_path: str = "ffprobe"
    ffmpeg_path: str = "ffmpeg"
    probe_timeout_seconds: int = 60
    remux_timeout_seconds: int = 600
    max_video_upload_bytes: int = 1 << 30  # 1 GiB
    video_url_ttl_seconds: int = 600  # 10 minutes
    temp_dir: str = ""  # empty -> system default
    video_media_type: str = "video/mp4"
    thumbnail_media_types: List[str] = field(default_factory=lambda: ["image/png", "image/jpeg"])

    @classmethod
    def from_env(cls) -> 'MediaConfig':
        return cls(
            ffprobe_path=cls.get_env_str('FFPROBE_PATH', "ffprobe"),
            ffmpeg_path=cls.get_env_str('FFMPEG_PATH', "ffmpeg"),
            probe_timeout_seconds=cls.get_env_int('FFPROBE_TIMEOUT', 60),
            remux_timeout_seconds=cls.get_env_int('FFMPEG_TIMEOUT', 600),
            max_video_upload_bytes=cls.get_env_int('MAX_VIDEO_UPLOAD_BYTES', 1 << 30),
            video_url_ttl_seconds=cls.get_env_int('VIDEO_URL_TTL_SECONDS', 600),
            temp_dir=cls.get_env_str('UPLOAD_TEMP_DIR', ""),
        )
