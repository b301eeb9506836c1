"""Render a CV document as a standalone, print-ready HTML page."""

from __future__ import annotations

from typing import Sequence

from bs4 import BeautifulSoup, Tag

from cvcanvas.schemas import Section, SectionKind, SectionStyle

_PAGE_CSS = """
@page { size: A4; margin: 0; }
body { margin: 0; background: #f3f4f6; font-family: system-ui, sans-serif; }
.cv-page { width: 210mm; min-height: 297mm; margin: 0 auto; background: #ffffff; }
.cv-image { max-width: 100%; height: auto; }
@media print { body { background: none; } .cv-page { margin: 0; } }
"""


def style_to_css(style: SectionStyle) -> str:
    """Map a style record to an inline CSS declaration list."""
    if style.border_style == "none":
        border = "none"
    else:
        border = f"{style.border_width} {style.border_style} {style.border_color}"
    declarations = [
        ("background-color", style.background_color),
        ("padding", style.padding),
        ("margin", style.margin),
        ("border", border),
    ]
    return "; ".join(f"{name}: {value}" for name, value in declarations)


def render_html(document: Sequence[Section], *, title: str = "CV") -> str:
    """Build the HTML page for a document.

    Text content is escaped and keeps its line breaks. Image content is
    used as the ``src`` of an ``<img>``.
    """
    soup = BeautifulSoup("<!DOCTYPE html><html><head></head><body></body></html>", "html.parser")
    head = soup.head
    body = soup.body
    if head is None or body is None:
        raise ValueError("HTML skeleton is missing <head> or <body>")

    head.append(soup.new_tag("meta", attrs={"charset": "utf-8"}))
    title_tag = soup.new_tag("title")
    title_tag.string = title
    head.append(title_tag)
    style_tag = soup.new_tag("style")
    style_tag.string = _PAGE_CSS
    head.append(style_tag)

    page = soup.new_tag("div", attrs={"class": "cv-page"})
    for section in document:
        page.append(_render_section(soup, section))
    body.append(page)
    return str(soup)


def _render_section(soup: BeautifulSoup, section: Section) -> Tag:
    node = soup.new_tag(
        "div",
        attrs={
            "class": f"cv-section cv-{section.kind.value}",
            "data-section-id": section.id,
            "style": style_to_css(section.style),
        },
    )
    content = _render_content(soup, section)
    if content is not None:
        node.append(content)
    if section.children:
        children = soup.new_tag("div", attrs={"class": "cv-children"})
        for child in section.children:
            children.append(_render_section(soup, child))
        node.append(children)
    return node


def _render_content(soup: BeautifulSoup, section: Section) -> Tag | None:
    if not section.content:
        return None
    if section.kind is SectionKind.IMAGE:
        return soup.new_tag("img", attrs={"src": section.content, "alt": "CV image", "class": "cv-image"})

    wrapper = soup.new_tag("div", attrs={"class": "cv-text"})
    for index, line in enumerate(section.content.split("\n")):
        if index:
            wrapper.append(soup.new_tag("br"))
        wrapper.append(line)
    return wrapper
