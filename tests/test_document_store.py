"""Tests for the document store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from conftest import make_section
from cvcanvas.backends import FileBackend, MemoryBackend
from cvcanvas.document_store import DocumentStore, document_key, dump_document, parse_document
from cvcanvas.exceptions import MalformedRecordError, StorageUnavailableError
from cvcanvas.schemas import Section, SectionKind
from cvcanvas.section_tree import create_section, insert_child, new_document, update_section


class TestKeyScheme:
    """Tests for document_key."""

    def test_prefixes_document_id(self) -> None:
        assert document_key("abc") == "cv_abc"

    def test_differs_from_registry_key(self) -> None:
        assert document_key("s") != "cvs"

    def test_rejects_empty_id(self) -> None:
        with pytest.raises(ValueError):
            document_key("")


class TestRoundTrip:
    """Save followed by load returns the same document."""

    def test_round_trip_memory(self, store: DocumentStore, sample_tree: tuple[Section, ...]) -> None:
        store.save("doc", sample_tree)

        assert store.load("doc") == sample_tree

    def test_round_trip_file(self, tmp_path: Path, id_factory: Callable[[], str]) -> None:
        """Children order, kinds and styles survive a file round trip."""
        store = DocumentStore(FileBackend(tmp_path))
        document = new_document(id_factory=id_factory)
        root_id = document[0].id
        for _ in range(3):
            document = insert_child(document, root_id, create_section(id_factory=id_factory))
        document = update_section(document, "id-3", {"kind": "text", "content": "Line 1\nLine 2"})

        store.save("doc", document)
        loaded = store.load("doc")

        assert loaded == document
        assert loaded is not None
        assert [child.id for child in loaded[0].children] == ["id-2", "id-3", "id-4"]
        assert loaded[0].children[1].kind is SectionKind.TEXT

    def test_save_overwrites(self, store: DocumentStore) -> None:
        store.save("doc", (make_section("one"),))
        store.save("doc", (make_section("two"),))

        loaded = store.load("doc")
        assert loaded is not None
        assert [section.id for section in loaded] == ["two"]

    def test_stored_value_is_json_array(self, backend: MemoryBackend, store: DocumentStore) -> None:
        store.save("doc", (make_section("one"),))

        payload = json.loads(backend.get("cv_doc") or "")
        assert isinstance(payload, list)
        assert payload[0]["style"]["backgroundColor"] == "transparent"

    @pytest.mark.asyncio
    async def test_async_round_trip(self, store: DocumentStore, sample_tree: tuple[Section, ...]) -> None:
        await store.save_async("doc", sample_tree)

        assert await store.load_async("doc") == sample_tree


class TestLoad:
    """Tests for load outcomes."""

    def test_unknown_id_returns_none(self, store: DocumentStore) -> None:
        assert store.load("never-saved") is None

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "42",
            '{"pages": []}',
            '[{"id": "x"}]',
            '[{"id": "x", "kind": "container", "content": "", "children": []}]',
            '[{"id": "x", "kind": "video", "content": "", "style": '
            '{"backgroundColor": "a", "padding": "b", "margin": "c"}, "children": []}]',
            '[{"id": "x", "kind": "container", "content": 5, "style": '
            '{"backgroundColor": "a", "padding": "b", "margin": "c"}, "children": []}]',
        ],
    )
    def test_corrupted_value_raises(self, backend: MemoryBackend, store: DocumentStore, raw: str) -> None:
        backend.set("cv_doc", raw)

        with pytest.raises(MalformedRecordError):
            store.load("doc")

    def test_deeply_nested_value_raises(self, backend: MemoryBackend, store: DocumentStore) -> None:
        backend.set("cv_doc", "[" * 100000 + "]" * 100000)

        with pytest.raises(MalformedRecordError):
            store.load("doc")

    def test_duplicate_ids_raise(self, backend: MemoryBackend, store: DocumentStore) -> None:
        backend.set("cv_doc", dump_document((make_section("x", make_section("x")),)))

        with pytest.raises(MalformedRecordError, match="repeats section ids"):
            store.load("doc")

    def test_legacy_wrapper_is_accepted(self, backend: MemoryBackend, store: DocumentStore) -> None:
        """Documents saved with the sections wrapper and old field names still load."""
        legacy = {
            "sections": [
                {
                    "id": "r",
                    "type": "container",
                    "content": "",
                    "styles": {"backgroundColor": "transparent", "padding": "20px", "margin": "0px"},
                    "children": [],
                }
            ]
        }
        backend.set("cv_doc", json.dumps(legacy))

        loaded = store.load("doc")

        assert loaded is not None
        assert loaded[0].id == "r"
        assert loaded[0].style.border_style == "none"

    def test_empty_document_is_a_record(self, store: DocumentStore) -> None:
        store.save("doc", ())

        assert store.load("doc") == ()

    def test_backend_failure_propagates(self) -> None:
        backend = MagicMock()
        backend.get.side_effect = StorageUnavailableError("down")

        with pytest.raises(StorageUnavailableError):
            DocumentStore(backend).load("doc")


def test_delete_removes_record(store: DocumentStore) -> None:
    store.save("doc", (make_section("one"),))

    store.delete("doc")

    assert store.load("doc") is None


def test_parse_document_returns_tuple() -> None:
    document = parse_document(dump_document((make_section("a"), make_section("b"))))

    assert isinstance(document, tuple)
    assert [section.id for section in document] == ["a", "b"]
