"""
Tests for settings, backend selection and upload helpers
"""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from harmony.core.config import Settings
from harmony.storage import MemStorage, get_storage
from harmony.utils.file_upload import _write_limited, delete_upload, get_file_extension, url_to_path


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "STORAGE_BACKEND", "SESSION_SECRET", "PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.port == 5000
        assert settings.session_secret == "harmony-ai-secret"
        assert settings.resolved_storage_backend == "memory"

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/harmony")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        settings = Settings(_env_file=None)
        assert settings.port == 8080
        assert settings.openai_api_key == "sk-test"
        assert settings.resolved_storage_backend == "database"

    def test_explicit_backend_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/harmony")
        monkeypatch.setenv("STORAGE_BACKEND", "Memory")
        assert Settings(_env_file=None).resolved_storage_backend == "memory"


class TestStorageSelection:

    @pytest.fixture(autouse=True)
    def fresh_cache(self):
        get_storage.cache_clear()
        yield
        get_storage.cache_clear()

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setattr("harmony.storage.get_settings",
                            lambda: Settings(_env_file=None, storage_backend="memory"))
        store = get_storage()
        assert isinstance(store, MemStorage)
        assert get_storage() is store

    def test_unknown_backend(self, monkeypatch):
        monkeypatch.setattr("harmony.storage.get_settings",
                            lambda: Settings(_env_file=None, storage_backend="mongo"))
        with pytest.raises(ValueError):
            get_storage()


class TestUploadHelpers:

    def test_extension(self):
        assert get_file_extension("Photo.JPG") == ".jpg"
        assert get_file_extension("noext") == ""

    def test_url_to_path(self, upload_dir):
        assert url_to_path("/uploads/a.png") == str(upload_dir / "a.png")
        assert url_to_path("/uploads/../../etc/passwd") == str(upload_dir / "passwd")
        assert url_to_path("https://cdn.example.com/a.png") is None
        assert url_to_path(None) is None

    def test_delete_upload(self, upload_dir):
        (upload_dir / "a.png").write_bytes(b"x")
        assert delete_upload("/uploads/a.png") is True
        assert delete_upload("/uploads/a.png") is False
        assert delete_upload("https://cdn.example.com/a.png") is False

    def test_failed_write_leaves_no_file(self, upload_dir):
        file = Mock()
        file.read = AsyncMock(side_effect=[b"partial", OSError("connection reset")])
        with pytest.raises(OSError):
            asyncio.run(_write_limited(file, "image", ".png", max_mb=1))
        assert list(upload_dir.iterdir()) == []
