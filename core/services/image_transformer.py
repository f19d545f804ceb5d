from abc import ABC, abstractmethod


class ImageProcessingError(Exception):
    pass


class ImageTransformer(ABC):
    @abstractmethod
    def square(self, path: str, size: int) -> bytes:
        """Decode the image at path and return it resized to size x size as JPEG bytes."""
