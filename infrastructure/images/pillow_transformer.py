import io
import logging

from PIL import Image, UnidentifiedImageError

from core.services.image_transformer import ImageTransformer, ImageProcessingError

logger = logging.getLogger(__name__)


class PillowImageTransformer(ImageTransformer):
    def __init__(self, quality: int = 90):
        self.quality = quality

    def _to_rgb(self, img: Image.Image) -> Image.Image:
        # flatten transparency on white, JPEG has no alpha
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode == "P":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        if img.mode != "RGB":
            return img.convert("RGB")
        return img

    def square(self, path: str, size: int) -> bytes:
        try:
            with Image.open(path) as img:
                img.load()
                resized = self._to_rgb(img).resize((size, size), Image.Resampling.LANCZOS)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.error("Cannot decode image %s: %s", path, e)
            raise ImageProcessingError(f"Cannot process image: {e}") from e

        output = io.BytesIO()
        resized.save(output, format="JPEG", quality=self.quality)
        return output.getvalue()
