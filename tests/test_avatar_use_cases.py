"""Avatar pipeline: transform, upload, temp cleanup and persistence."""

import os
from dataclasses import replace
from pathlib import Path

import pytest
from PIL import Image

from core.entities.result import Err, Ok
from core.services.image_transformer import ImageProcessingError
from core.services.object_store import ObjectStore, ObjectStoreError
from core.use_cases.avatar_use_cases import AVATAR_SIZE, update_avatar


class FailingStore(ObjectStore):
    def __init__(self):
        self.calls = 0

    def upload(self, data, folder, filename, content_type="image/jpeg"):
        self.calls += 1
        raise ObjectStoreError("bucket unavailable")


@pytest.fixture
def user(repo):
    return repo.create_user("Alice", "alice@example.com", "hash", "https://www.gravatar.com/avatar/x", "vt-1")


@pytest.mark.asyncio
async def test_update_avatar_stores_square_jpeg(repo, transformer, store, user, tmp_path, image_file):
    temp = image_file("upload.png", size=(640, 480))

    result = await update_avatar(repo, transformer, store, user, str(temp))

    assert isinstance(result, Ok)
    new_url = result.value.avatar_url
    assert new_url != user.avatar_url
    assert new_url.startswith("http://testserver/static/avatars/")
    assert repo.get_by_id(user.id).avatar_url == new_url

    published = tmp_path / "public" / "avatars" / new_url.rsplit("/", 1)[1]
    assert published.exists()
    with Image.open(published) as img:
        assert img.size == (AVATAR_SIZE, AVATAR_SIZE)
        assert img.format == "JPEG"


@pytest.mark.asyncio
async def test_update_avatar_removes_temp_file_on_success(repo, transformer, store, user, image_file):
    temp = image_file("upload.png")

    await update_avatar(repo, transformer, store, user, str(temp))

    assert not temp.exists()


@pytest.mark.asyncio
async def test_corrupt_image_leaves_user_untouched(repo, transformer, user, tmp_path):
    temp = tmp_path / "upload.png"
    temp.write_bytes(b"definitely not an image")
    store = FailingStore()

    with pytest.raises(ImageProcessingError):
        await update_avatar(repo, transformer, store, user, str(temp))

    assert store.calls == 0
    assert repo.get_by_id(user.id).avatar_url == user.avatar_url
    assert not temp.exists()


@pytest.mark.asyncio
async def test_upload_failure_leaves_user_untouched(repo, transformer, user, image_file):
    temp = image_file("upload.png")
    store = FailingStore()

    with pytest.raises(ObjectStoreError):
        await update_avatar(repo, transformer, store, user, str(temp))

    assert store.calls == 1
    assert repo.get_by_id(user.id).avatar_url == user.avatar_url
    assert not temp.exists()


@pytest.mark.asyncio
async def test_update_avatar_replaces_previous_upload(repo, transformer, store, user, image_file):
    first = await update_avatar(repo, transformer, store, user, str(image_file("a.png")))
    second = await update_avatar(repo, transformer, store, user, str(image_file("b.png")))

    assert first.value.avatar_url != second.value.avatar_url
    assert repo.get_by_id(user.id).avatar_url == second.value.avatar_url


@pytest.mark.asyncio
async def test_update_avatar_for_vanished_user(repo, transformer, store, user, image_file):
    ghost = replace(user, id="gone")

    result = await update_avatar(repo, transformer, store, ghost, str(image_file("a.png")))

    assert isinstance(result, Err)
    assert result.error.status_code == 404


@pytest.mark.asyncio
async def test_update_avatar_uses_custom_folder(repo, transformer, store, user, tmp_path, image_file):
    result = await update_avatar(
        repo, transformer, store, user, str(image_file("a.png")), folder="profile-pics"
    )

    assert "/profile-pics/" in result.value.avatar_url
    assert os.path.isdir(Path(tmp_path) / "public" / "profile-pics")
