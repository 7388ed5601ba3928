"""Generated image storage: files served under /images, or inline data URLs."""

import base64
import binascii
import logging
import uuid
from pathlib import Path

from logo_forge.generation.provider import GeneratedImage

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def data_url(image: GeneratedImage) -> str:
    return f"data:{image.mime_type};base64,{image.data}"


class ImageStore:
    """Persists provider images and returns the URL the browser should load."""

    def __init__(self, images_dir: str, public_base_url: str, inline: bool = False):
        self.images_dir = Path(images_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.inline = inline

    def ensure_dir(self) -> bool:
        if self.inline:
            return False
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.warning("Could not create images directory %s: %s", self.images_dir, e)
            return False

    def save(self, image: GeneratedImage) -> str:
        if self.inline:
            return data_url(image)

        ext = _EXTENSIONS.get(image.mime_type, "png")
        filename = f"logo-{uuid.uuid4().hex}.{ext}"
        try:
            raw = base64.b64decode(image.data, validate=True)
            self.images_dir.mkdir(parents=True, exist_ok=True)
            (self.images_dir / filename).write_bytes(raw)
        except (OSError, binascii.Error) as e:
            logger.warning("Could not save image file, using data URL: %s", e)
            return data_url(image)

        logger.info("Logo saved as %s", filename)
        return f"{self.public_base_url}/images/{filename}"
