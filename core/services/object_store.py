from abc import ABC, abstractmethod


class ObjectStoreError(Exception):
    pass


class ObjectStore(ABC):
    @abstractmethod
    def upload(self, data: bytes, folder: str, filename: str, content_type: str = "image/jpeg") -> str:
        """Store data under folder/filename and return its public URL."""
