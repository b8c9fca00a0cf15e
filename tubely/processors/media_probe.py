# tubely/processors/media_probe.py
import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from tubely.models.errors import MediaFormatError, MediaInspectionError, NoVideoStreamError
from tubely.models.video import Orientation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamInfo:
    """Geometry of a single stream as reported by ffprobe"""
    width: int = 0
    height: int = 0
    codec_type: str = ""


@dataclass(frozen=True)
class StreamMetadata:
    streams: List[StreamInfo]

    @property
    def first_video_stream(self) -> StreamInfo:
        """First stream with codec_type video; audio and data streams are skipped"""
        for stream in self.streams:
            if stream.codec_type == "video":
                return stream
        raise NoVideoStreamError("No video streams found")


class MediaInspector(ABC):
    """Reads stream metadata from a local media file"""

    @abstractmethod
    def inspect(self, file_path: str) -> StreamMetadata:
        pass


class FFprobeInspector(MediaInspector):
    def __init__(self, ffprobe_path: str = "ffprobe", timeout: int = 60):
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout

    def inspect(self, file_path: str) -> StreamMetadata:
        cmd = [
            self.ffprobe_path,
            '-v', 'error',
            '-print_format', 'json',
            '-show_streams',
            '-select_streams', 'v:0',
            file_path,
        ]
        logger.debug(f"Running ffprobe: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise MediaInspectionError("Error running ffprobe command", e) from e
        except subprocess.TimeoutExpired as e:
            raise MediaInspectionError(f"ffprobe timed out after {self.timeout}s", e) from e

        if result.returncode != 0:
            logger.error(f"ffprobe failed for {file_path}: {result.stderr.strip()}")
            raise MediaInspectionError(
                "Error running ffprobe command",
                RuntimeError(f"exit status {result.returncode}"),
            )

        return parse_ffprobe_output(result.stdout)


def parse_ffprobe_output(output: str) -> StreamMetadata:
    """Parse `ffprobe -print_format json -show_streams` output"""
    try:
        data = json.loads(output)
    except (json.JSONDecodeError, TypeError) as e:
        raise MediaFormatError("Couldn't parse ffprobe output", e) from e

    if not isinstance(data, dict):
        raise MediaFormatError("Couldn't parse ffprobe output")

    streams = []
    for stream in data.get("streams") or []:
        try:
            streams.append(StreamInfo(
                width=int(stream.get("width") or 0),
                height=int(stream.get("height") or 0),
                codec_type=stream.get("codec_type", ""),
            ))
        except (AttributeError, TypeError, ValueError) as e:
            raise MediaFormatError("Couldn't parse ffprobe output", e) from e

    return StreamMetadata(streams=streams)


def almost_equal(a: int, b: int) -> bool:
    return abs(a - b) < 2


def classify_dimensions(width: int, height: int) -> Orientation:
    """Bucket a frame size into 9:16, 16:9 or anything else.

    Ratios use truncating integer division so that sizes like 1080x1920 or
    608x1080 still match.
    """
    if almost_equal(width, height * 9 // 16):
        return Orientation.PORTRAIT
    if almost_equal(width, height * 16 // 9):
        return Orientation.LANDSCAPE
    return Orientation.OTHER


def classify(inspector: MediaInspector, file_path: str) -> Orientation:
    """Determine the orientation of the first video stream of a file"""
    metadata = inspector.inspect(file_path)
    stream = metadata.first_video_stream
    orientation = classify_dimensions(stream.width, stream.height)
    logger.info(f"Classified {file_path} ({stream.width}x{stream.height}) as {orientation.value}")
    return orientation
