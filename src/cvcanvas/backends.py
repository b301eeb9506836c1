"""Key-value backends the document store and registry persist into."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Final, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from cvcanvas.config import (
    CVCANVAS_HTTP_TIMEOUT_S,
    CVCANVAS_STORAGE_BACKEND,
    CVCANVAS_STORAGE_PATH,
    CVCANVAS_STORAGE_URL,
)
from cvcanvas.exceptions import StorageUnavailableError
from cvcanvas.utils.logging_config import get_logger

logger = get_logger(__name__)

_KEY_SUFFIX: Final[str] = ".json"


@runtime_checkable
class KeyValueBackend(Protocol):
    """Minimal string key-value storage.

    Implementations raise ``StorageUnavailableError`` when the medium
    cannot be reached. ``set`` must never leave a partially written value.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBackend:
    """Process-local backend, mainly for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileBackend:
    """Stores each key as a JSON file inside a directory.

    Writes go to a temporary file in the same directory which then
    replaces the target, so readers see either the old or the new value.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        """Get the file path for a key; unsafe characters are percent-encoded."""
        return self.root / f"{quote(key, safe='-_.')}{_KEY_SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageUnavailableError(f"Cannot read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot delete {path}: {exc}") from exc


class HttpBackend:
    """Backend for a remote key-value service.

    Keys map to ``{base_url}/{key}``: ``GET`` reads (404 means no record),
    ``PUT`` writes the whole value and ``DELETE`` removes it. Failures are
    reported once; retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = CVCANVAS_HTTP_TIMEOUT_S,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def close(self) -> None:
        self._client.close()

    def _url(self, key: str) -> str:
        return f"{self.base_url}/{quote(key, safe='')}"

    def _request(self, method: str, key: str, *, content: str | None = None) -> httpx.Response:
        url = self._url(key)
        try:
            response = self._client.request(
                method,
                url,
                content=content.encode("utf-8") if content is not None else None,
                headers={"Content-Type": "application/json"} if content is not None else None,
            )
        except httpx.RequestError as exc:
            raise StorageUnavailableError(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 404 and method in {"GET", "DELETE"}:
            return response
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageUnavailableError(f"HTTP {response.status_code} from {method} {url}") from exc
        return response

    def get(self, key: str) -> str | None:
        response = self._request("GET", key)
        if response.status_code == 404:
            return None
        return response.text

    def set(self, key: str, value: str) -> None:
        self._request("PUT", key, content=value)

    def delete(self, key: str) -> None:
        self._request("DELETE", key)


def create_backend(
    kind: str = CVCANVAS_STORAGE_BACKEND,
    *,
    path: Path = CVCANVAS_STORAGE_PATH,
    url: str = CVCANVAS_STORAGE_URL,
) -> KeyValueBackend:
    """Build the backend selected by configuration.

    Raises:
        ValueError: If ``kind`` is unknown or ``http`` is selected without a URL.
    """
    if kind == "memory":
        backend: KeyValueBackend = MemoryBackend()
    elif kind == "file":
        backend = FileBackend(path)
    elif kind == "http":
        if not url:
            raise ValueError("CVCANVAS_STORAGE_URL must be set for the http backend")
        backend = HttpBackend(url)
    else:
        raise ValueError(f"Unknown storage backend: {kind!r}")

    logger.info("Using storage backend", extra={"backend": kind})
    return backend
