from pathlib import Path

from core.services.object_store import ObjectStore, ObjectStoreError


class LocalObjectStore(ObjectStore):
    """Writes files under a directory the app serves as static content"""
    def __init__(self, root_dir: str, base_url: str):
        self.root_dir = Path(root_dir)
        self.base_url = base_url.rstrip("/")

    def upload(self, data: bytes, folder: str, filename: str, content_type: str = "image/jpeg") -> str:
        target = self.root_dir / folder / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise ObjectStoreError(f"Cannot write {target}: {e}") from e
        return f"{self.base_url}/{folder}/{filename}"
