from uuid import uuid4

import pytest
from sqlalchemy import text

from tubely.models.errors import StorageReferenceError
from tubely.models.video import StorageReference, VideoRecord


@pytest.fixture
def repo(container):
    return container.get_video_repository()


def test_create_get_update(repo):
    user_id = uuid4()
    created = repo.create_video(VideoRecord(user_id=user_id, title="clip", description="d"))

    fetched = repo.get_video(created.id)
    assert fetched.user_id == user_id
    assert fetched.title == "clip"
    assert fetched.video is None

    ref = StorageReference("bucket", "portrait/abc.mp4")
    repo.update_video(fetched.with_video(ref))
    assert repo.get_video(created.id).video == ref


def test_reference_persisted_as_delimited_string(repo, container):
    created = repo.create_video(VideoRecord(user_id=uuid4()))
    repo.update_video(created.with_video(StorageReference("bucket", "landscape/k.mp4")))

    with container.db_manager.engine.connect() as conn:
        raw = conn.execute(text("SELECT video_url FROM videos")).scalar_one()
    assert raw == "bucket,landscape/k.mp4"


def test_missing_video(repo):
    assert repo.get_video(uuid4()) is None
    assert repo.delete_video(uuid4()) is False


def test_list_for_user(repo):
    user_id = uuid4()
    repo.create_video(VideoRecord(user_id=user_id, title="a"))
    repo.create_video(VideoRecord(user_id=user_id, title="b"))
    repo.create_video(VideoRecord(user_id=uuid4(), title="c"))
    assert sorted(v.title for v in repo.list_videos_for_user(user_id)) == ["a", "b"]


def test_malformed_stored_reference_loads_and_fails_on_parse(repo, container):
    user_id = uuid4()
    created = repo.create_video(VideoRecord(user_id=user_id))
    with container.db_manager.engine.begin() as conn:
        conn.execute(text("UPDATE videos SET video_url = 'no-comma-here'"))

    fetched = repo.get_video(created.id)
    assert fetched.video_ref == "no-comma-here"
    assert [v.id for v in repo.list_videos_for_user(user_id)] == [created.id]
    with pytest.raises(StorageReferenceError):
        fetched.video
