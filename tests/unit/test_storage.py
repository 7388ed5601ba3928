"""Tests for generated image storage."""

import base64

from logo_forge.generation.provider import GeneratedImage
from logo_forge.generation.storage import ImageStore, data_url


PNG = base64.b64encode(b"\x89PNG\r\n\x1a\nbytes").decode()


class TestImageStore:
    def test_inline_mode(self, tmp_path):
        store = ImageStore(str(tmp_path / "imgs"), "http://cdn", inline=True)
        image = GeneratedImage(data=PNG)
        assert store.save(image) == data_url(image)
        assert store.ensure_dir() is False
        assert not (tmp_path / "imgs").exists()

    def test_writes_file_and_returns_public_url(self, tmp_path):
        store = ImageStore(str(tmp_path / "imgs"), "http://cdn/")
        url = store.save(GeneratedImage(data=PNG, mime_type="image/jpeg"))
        assert url.startswith("http://cdn/images/logo-")
        assert url.endswith(".jpg")
        name = url.rsplit("/", 1)[1]
        assert (tmp_path / "imgs" / name).read_bytes() == b"\x89PNG\r\n\x1a\nbytes"

    def test_unique_names(self, tmp_path):
        store = ImageStore(str(tmp_path), "http://cdn")
        assert store.save(GeneratedImage(data=PNG)) != store.save(GeneratedImage(data=PNG))

    def test_bad_base64_falls_back_to_data_url(self, tmp_path):
        store = ImageStore(str(tmp_path), "http://cdn")
        url = store.save(GeneratedImage(data="***not base64***"))
        assert url.startswith("data:image/png;base64,")

    def test_ensure_dir(self, tmp_path):
        store = ImageStore(str(tmp_path / "a" / "b"), "http://cdn")
        assert store.ensure_dir() is True
        assert (tmp_path / "a" / "b").is_dir()
