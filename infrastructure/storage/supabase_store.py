import logging

from supabase import create_client, Client

from core.services.object_store import ObjectStore, ObjectStoreError

logger = logging.getLogger(__name__)


class SupabaseObjectStore(ObjectStore):
    """Public Supabase Storage bucket"""
    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, data: bytes, folder: str, filename: str, content_type: str = "image/jpeg") -> str:
        path = f"{folder}/{filename}"
        storage = self.client.storage.from_(self.bucket)
        try:
            storage.upload(path=path, file=data, file_options={"content-type": content_type})
            return storage.get_public_url(path)
        except Exception as e:
            logger.error("Upload of %s to bucket %s failed: %s", path, self.bucket, e)
            raise ObjectStoreError(f"Upload failed: {e}") from e


def build_supabase_store(url: str, key: str, bucket: str) -> SupabaseObjectStore:
    return SupabaseObjectStore(create_client(url, key), bucket)
