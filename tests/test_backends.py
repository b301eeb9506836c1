"""Tests for key-value backends."""

from __future__ import annotations

import os
from pathlib import Path

import httpx
import pytest

from cvcanvas.backends import (
    FileBackend,
    HttpBackend,
    KeyValueBackend,
    MemoryBackend,
    create_backend,
)
from cvcanvas.exceptions import StorageUnavailableError


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_get_set_delete(self) -> None:
        backend = MemoryBackend()

        assert backend.get("k") is None
        backend.set("k", "v")
        assert backend.get("k") == "v"
        backend.delete("k")
        assert backend.get("k") is None

    def test_delete_missing_is_noop(self) -> None:
        MemoryBackend().delete("missing")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemoryBackend(), KeyValueBackend)


class TestFileBackend:
    """Tests for FileBackend."""

    def test_get_missing_returns_none(self, tmp_path: Path) -> None:
        assert FileBackend(tmp_path).get("k") is None

    def test_set_creates_directory(self, tmp_path: Path) -> None:
        backend = FileBackend(tmp_path / "nested" / "store")

        backend.set("cv_1", "[]")

        assert backend.get("cv_1") == "[]"
        assert (tmp_path / "nested" / "store" / "cv_1.json").is_file()

    def test_set_leaves_no_temp_files(self, tmp_path: Path) -> None:
        backend = FileBackend(tmp_path)

        backend.set("k", "one")
        backend.set("k", "two")

        assert backend.get("k") == "two"
        assert sorted(path.name for path in tmp_path.iterdir()) == ["k.json"]

    def test_keys_are_escaped(self, tmp_path: Path) -> None:
        backend = FileBackend(tmp_path)

        backend.set("../escape", "x")

        assert backend.path_for("../escape").parent == tmp_path
        assert backend.get("../escape") == "x"

    def test_failed_write_keeps_old_value(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A write that fails part-way leaves the previous value readable."""
        backend = FileBackend(tmp_path)
        backend.set("k", "old")

        def broken_replace(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)

        with pytest.raises(StorageUnavailableError, match="disk full"):
            backend.set("k", "new")

        assert backend.get("k") == "old"
        assert sorted(path.name for path in tmp_path.iterdir()) == ["k.json"]

    def test_unreadable_path_raises(self, tmp_path: Path) -> None:
        backend = FileBackend(tmp_path)
        backend.path_for("k").mkdir(parents=True)

        with pytest.raises(StorageUnavailableError):
            backend.get("k")

    def test_delete(self, tmp_path: Path) -> None:
        backend = FileBackend(tmp_path)
        backend.set("k", "v")

        backend.delete("k")
        backend.delete("k")

        assert backend.get("k") is None


class TestHttpBackend:
    """Tests for HttpBackend against a mocked transport."""

    @staticmethod
    def _backend(handler) -> HttpBackend:  # noqa: ANN001
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpBackend("https://kv.example.com/store/", client=client)

    def test_round_trip(self) -> None:
        data: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            key = request.url.path.rsplit("/", 1)[1]
            if request.method == "PUT":
                data[key] = request.content.decode("utf-8")
                return httpx.Response(204)
            if request.method == "DELETE":
                data.pop(key, None)
                return httpx.Response(204)
            if key not in data:
                return httpx.Response(404)
            return httpx.Response(200, text=data[key])

        backend = self._backend(handler)

        assert backend.get("cv_1") is None
        backend.set("cv_1", "[]")
        assert backend.get("cv_1") == "[]"
        backend.delete("cv_1")
        assert backend.get("cv_1") is None

    def test_builds_key_url(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text="v")

        self._backend(handler).get("cv_a/b")

        assert seen == ["https://kv.example.com/store/cv_a%2Fb"]

    def test_server_error_is_storage_unavailable(self) -> None:
        backend = self._backend(lambda request: httpx.Response(503))

        with pytest.raises(StorageUnavailableError, match="HTTP 503"):
            backend.get("k")
        with pytest.raises(StorageUnavailableError):
            backend.set("k", "v")

    def test_connection_error_is_storage_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StorageUnavailableError, match="refused"):
            self._backend(handler).get("k")

    def test_put_404_is_an_error(self) -> None:
        backend = self._backend(lambda request: httpx.Response(404))

        with pytest.raises(StorageUnavailableError):
            backend.set("k", "v")


class TestCreateBackend:
    """Tests for create_backend."""

    def test_memory(self) -> None:
        assert isinstance(create_backend("memory"), MemoryBackend)

    def test_file(self, tmp_path: Path) -> None:
        backend = create_backend("file", path=tmp_path)

        assert isinstance(backend, FileBackend)
        assert backend.root == tmp_path

    def test_http_requires_url(self) -> None:
        with pytest.raises(ValueError, match="CVCANVAS_STORAGE_URL"):
            create_backend("http", url="")

    def test_http(self) -> None:
        backend = create_backend("http", url="https://kv.example.com")

        assert isinstance(backend, HttpBackend)
        backend.close()

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            create_backend("redis")
