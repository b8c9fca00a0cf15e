import base64
import logging
import os
import secrets

from tubely.models.video import Orientation

logger = logging.getLogger(__name__)

RANDOM_NAME_BYTES = 32


def media_type_to_ext(media_type: str) -> str:
    """'video/mp4' -> '.mp4'; anything not of the form 'type/subtype' -> '.bin'"""
    parts = media_type.split("/")
    if len(parts) != 2:
        return ".bin"
    return "." + parts[1]


def random_asset_name() -> str:
    """32 random bytes, URL-safe base64 without padding"""
    raw = secrets.token_bytes(RANDOM_NAME_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def get_asset_path(name: str, media_type: str) -> str:
    return f"{name}{media_type_to_ext(media_type)}"


def derive_object_key(orientation: Orientation, media_type: str) -> str:
    """Object store key: '<orientation>/<random><ext>'"""
    return f"{orientation.directory}/{get_asset_path(random_asset_name(), media_type)}"


def ensure_assets_dir(assets_root: str) -> None:
    if not os.path.isdir(assets_root):
        os.makedirs(assets_root, exist_ok=True)
        logger.info(f"Created assets directory: {assets_root}")


def asset_disk_path(assets_root: str, asset_path: str) -> str:
    return os.path.join(assets_root, asset_path)
