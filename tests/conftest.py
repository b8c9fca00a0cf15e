import itertools
import os
import shutil
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from tubely.api.fastapi_server import TubelyAPIServer
from tubely.config import AppConfig, AuthConfig, DatabaseConfig, MediaConfig, StorageConfig
from tubely.di.dependencies import DependencyContainer
from tubely.helpers.auth import make_jwt
from tubely.models.errors import RemuxError, UploadError
from tubely.processors.faststart import MediaRemuxer, processed_path
from tubely.processors.media_probe import MediaInspector, StreamInfo, StreamMetadata
from tubely.services.object_storage import ObjectStore

TEST_BUCKET = "tubely-test-bucket"


class FakeInspector(MediaInspector):
    def __init__(self, width=1080, height=1920, error=None):
        self.width = width
        self.height = height
        self.error = error
        self.calls = []

    def inspect(self, file_path):
        self.calls.append(file_path)
        if self.error is not None:
            raise self.error
        return StreamMetadata(streams=[StreamInfo(self.width, self.height, "video")])


class FakeRemuxer(MediaRemuxer):
    """Copies the input like `ffmpeg -c copy` would, optionally failing midway"""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def remux(self, file_path):
        self.calls.append(file_path)
        new_path = processed_path(file_path)
        shutil.copyfile(file_path, new_path)
        if self.fail:
            raise RemuxError("Error executing ffmpeg command")
        return new_path


class FakeObjectStore(ObjectStore):
    def __init__(self, fail_put=False):
        self.fail_put = fail_put
        self.objects = {}
        self.presigned = []
        self._nonce = itertools.count(1)

    def put_object(self, bucket, key, body, content_type):
        if self.fail_put:
            raise UploadError("Upload to s3 failed")
        self.objects[(bucket, key)] = (body.read(), content_type)

    def presign_get(self, bucket, key, expires_in):
        url = (f"https://{bucket}.s3.us-east-1.amazonaws.com/{key}"
               f"?X-Amz-Expires={expires_in}&X-Amz-Signature=sig{next(self._nonce)}")
        self.presigned.append(url)
        return url


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, scratch_dir):
    return AppConfig(
        port=8091,
        database=DatabaseConfig(url="sqlite://"),
        storage=StorageConfig(bucket=TEST_BUCKET, region="us-east-1", assets_root=str(tmp_path / "assets")),
        media=MediaConfig(temp_dir=str(scratch_dir)),
        auth=AuthConfig(jwt_secret="test-secret"),
    )


@pytest.fixture
def inspector():
    return FakeInspector()


@pytest.fixture
def remuxer():
    return FakeRemuxer()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def container(config, inspector, remuxer, object_store):
    container = DependencyContainer(config, object_store=object_store, inspector=inspector, remuxer=remuxer)
    yield container
    container.close()


@pytest.fixture
def video_usecase(container):
    return container.get_video_usecase()


@pytest.fixture
def client(config, video_usecase):
    server = TubelyAPIServer(config, video_usecase)
    with TestClient(server.app) as client:
        yield client


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def auth_headers(config):
    def make(user_id):
        return {"Authorization": f"Bearer {make_jwt(user_id, config.auth)}"}
    return make


def scratch_files_left(scratch_dir):
    return sorted(os.listdir(scratch_dir))
