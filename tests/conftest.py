"""Test setup for cvcanvas."""

from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cvcanvas.backends import MemoryBackend  # noqa: E402
from cvcanvas.document_store import DocumentStore  # noqa: E402
from cvcanvas.schemas import Section, SectionKind, SectionStyle  # noqa: E402


def make_style(**overrides: str) -> SectionStyle:
    values = {
        "background_color": "transparent",
        "padding": "10px",
        "margin": "0px",
    }
    values.update(overrides)
    return SectionStyle(**values)


def make_section(
    section_id: str,
    *children: Section,
    kind: SectionKind = SectionKind.CONTAINER,
    content: str = "",
) -> Section:
    return Section(id=section_id, kind=kind, content=content, style=make_style(), children=children)


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic identifiers: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def sample_tree() -> tuple[Section, ...]:
    """Two roots; ``root`` holds ``a`` (with ``a1``) and ``b``."""
    return (
        make_section(
            "root",
            make_section("a", make_section("a1", kind=SectionKind.TEXT, content="x")),
            make_section("b", kind=SectionKind.TEXT, content="hello"),
        ),
        make_section("footer"),
    )


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> DocumentStore:
    return DocumentStore(backend)
