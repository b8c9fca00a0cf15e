# tubely/processors/faststart.py
import logging
import subprocess
from abc import ABC, abstractmethod

from tubely.models.errors import RemuxError

logger = logging.getLogger(__name__)

PROCESSED_SUFFIX = ".processed"


class MediaRemuxer(ABC):
    """Rewrites a media container without re-encoding"""

    @abstractmethod
    def remux(self, file_path: str) -> str:
        """Write a playback-optimized copy and return its path"""
        pass


def processed_path(file_path: str) -> str:
    return file_path + PROCESSED_SUFFIX


class FFmpegFastStartRemuxer(MediaRemuxer):
    """Moves the moov atom to the front so playback can start early"""

    def __init__(self, ffmpeg_path: str = "ffmpeg", timeout: int = 600):
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout

    def remux(self, file_path: str) -> str:
        new_path = processed_path(file_path)
        cmd = [
            self.ffmpeg_path,
            '-i', file_path,
            '-c', 'copy',                # Stream copy, no re-encode
            '-movflags', 'faststart',    # Progressive download
            '-f', 'mp4',
            '-y',                        # Overwrite output file
            new_path,
        ]
        logger.debug(f"🔧 Processing faststart: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise RemuxError("Error executing ffmpeg command", e) from e
        except subprocess.TimeoutExpired as e:
            raise RemuxError(f"ffmpeg timed out after {self.timeout}s", e) from e

        if result.returncode != 0:
            logger.error(f"ffmpeg faststart failed for {file_path}: {result.stderr.strip()[-1500:]}")
            raise RemuxError(
                "Error executing ffmpeg command",
                RuntimeError(f"exit status {result.returncode}"),
            )

        return new_path
