import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import uuid4

from core.entities.errors import NotFound
from core.entities.result import Err, Ok, Result
from core.entities.user import User
from core.repositories.user_repository import UserRepository
from core.services.image_transformer import ImageTransformer
from core.services.object_store import ObjectStore

logger = logging.getLogger(__name__)

AVATAR_SIZE = 250


def _remove(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


@asynccontextmanager
async def temp_upload(path: str) -> AsyncIterator[str]:
    """Yield the temp file path and delete the file on every exit path."""
    try:
        yield path
    finally:
        await asyncio.to_thread(_remove, path)


async def update_avatar(
    repo: UserRepository,
    transformer: ImageTransformer,
    store: ObjectStore,
    user: User,
    temp_path: str,
    folder: str = "avatars",
) -> Result[User]:
    """Resize the uploaded image, publish it and point the user's avatar at it.

    Transform errors stop the pipeline before anything is uploaded, upload
    errors stop it before the user record changes. Both propagate as
    exceptions; the temp file is gone either way.
    """
    async with temp_upload(temp_path) as path:
        data = await asyncio.to_thread(transformer.square, path, AVATAR_SIZE)
        filename = f"{user.id}_{uuid4().hex[:12]}.jpg"
        avatar_url = await asyncio.to_thread(store.upload, data, folder, filename)

    updated = repo.update_avatar(user.id, avatar_url)
    if updated is None:
        return Err(NotFound("Not found"))
    logger.info("Avatar for user %s stored at %s", user.id, avatar_url)
    return Ok(updated)
