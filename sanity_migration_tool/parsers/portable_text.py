from __future__ import annotations

from typing import Any, Dict, List, Optional
import re

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

from .block_schema import (
    block,
    span,
    link_def,
    validate_blocks,
)


Segment = List[Any]  # [text, marks]

_WS_RE = re.compile(r"[ \t\r\n\f\v]+")

_DECORATOR_TAGS = {
    "strong": "strong",
    "b": "strong",
    "em": "em",
    "i": "em",
    "u": "underline",
    "s": "strike-through",
    "strike": "strike-through",
    "del": "strike-through",
    "code": "code",
}

_INLINE_TAGS = {
    "span", "a", "strong", "b", "em", "i", "u", "s", "strike", "del", "code",
    "img", "br", "sup", "sub", "small", "mark", "abbr", "font", "label",
}

_CONTAINER_TAGS = {"div", "section", "article", "main", "header", "footer", "aside", "body", "html"}

# Elements the block-only schema cannot represent; they keep their text.
_TEXT_FALLBACK_TAGS = {"table", "thead", "tbody", "tfoot", "tr", "td", "th", "figure", "figcaption", "dl", "dt", "dd"}

_SKIP_TAGS = {"script", "style", "noscript", "template", "head", "hr", "iframe"}


def _is_markup_only(node: Any) -> bool:
    return isinstance(node, (Comment, Doctype))


def _finalize_spans(segments: List[Segment], *, preserve_ws: bool = False) -> List[Dict[str, Any]]:
    """Turn raw text segments into spans: collapse whitespace between
    segments, trim the block edges and merge neighbours with equal marks."""
    merged: List[Segment] = []
    for text, marks in segments:
        if not preserve_ws and text.startswith(" "):
            prev = merged[-1][0] if merged else ""
            if not prev or prev.endswith((" ", "\n")):
                text = text.lstrip(" ")
        if not text:
            continue
        if merged and merged[-1][1] == marks:
            merged[-1][0] += text
        else:
            merged.append([text, list(marks)])

    if not preserve_ws:
        while merged:
            merged[-1][0] = merged[-1][0].rstrip()
            if merged[-1][0]:
                break
            merged.pop()
        if merged:
            merged[0][0] = merged[0][0].lstrip()

    return [span(text, marks) for text, marks in merged if text]


def convert_html_to_blocks(html: Optional[str]) -> List[Dict[str, Any]]:
    """
    Convert an HTML fragment to Sanity block content (Portable Text).

    The target schema is a single array field of generic ``block`` nodes, so
    only text survives: headings, paragraphs, blockquotes, lists (with
    nesting levels), inline decorators and links. Images, embeds and tables
    are reduced to their text. The parser is lenient, so malformed markup
    degrades to literal text blocks rather than raising.
    """
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "html.parser")

    for bad in soup.find_all(list(_SKIP_TAGS - {"hr"})):
        bad.decompose()

    blocks: List[Dict[str, Any]] = []

    def build_inline(children_iter, active: List[str], mark_defs: List[Dict[str, Any]], deferred_lists: List[Tag], preserve_ws: bool = False) -> List[Segment]:
        parts: List[Segment] = []
        for child in children_iter:
            if _is_markup_only(child):
                continue
            if isinstance(child, NavigableString):
                text = str(child).replace("\xa0", " ")
                if not preserve_ws:
                    text = _WS_RE.sub(" ", text)
                if text:
                    parts.append([text, active])
                continue
            if not isinstance(child, Tag):
                continue
            name = (child.name or "").lower()

            if name == "br":
                parts.append(["\n", active])
                continue
            if name == "img":
                continue
            if name in ("ul", "ol"):
                # emitted as list blocks after the enclosing block
                deferred_lists.append(child)
                continue

            new_active = active
            if name in _DECORATOR_TAGS and _DECORATOR_TAGS[name] not in active:
                new_active = active + [_DECORATOR_TAGS[name]]
            elif name == "a":
                href = child.get("href")
                if isinstance(href, list):
                    href = href[0] if href else None
                if href:
                    definition = link_def(href)
                    mark_defs.append(definition)
                    new_active = active + [definition["_key"]]

            parts.extend(build_inline(child.children, new_active, mark_defs, deferred_lists, preserve_ws))
        return parts

    def emit(children_iter, *, style: str = "normal", list_item: Optional[str] = None, level: Optional[int] = None, preserve_ws: bool = False, marks: Optional[List[str]] = None) -> None:
        mark_defs: List[Dict[str, Any]] = []
        deferred_lists: List[Tag] = []
        segments = build_inline(children_iter, list(marks or []), mark_defs, deferred_lists, preserve_ws)
        spans = _finalize_spans(segments, preserve_ws=preserve_ws)
        if any(s["text"].strip() for s in spans):
            used = {m for s in spans for m in s["marks"]}
            mark_defs = [d for d in mark_defs if d["_key"] in used]
            blocks.append(block(spans, style=style, mark_defs=mark_defs, list_item=list_item, level=level))
        # Lists found inside a paragraph, heading or list item follow it.
        for nested in deferred_lists:
            handle_list(nested, (level or 0) + 1)

    def handle_list(el: Tag, level: int) -> None:
        list_type = "number" if (el.name or "").lower() == "ol" else "bullet"
        loose: List[Any] = []

        def flush_loose() -> None:
            if loose:
                emit(list(loose), list_item=list_type, level=level)
                loose.clear()

        for child in el.children:
            if _is_markup_only(child):
                continue
            name = (child.name or "").lower() if isinstance(child, Tag) else ""
            if name == "li":
                flush_loose()
                emit(child.children, list_item=list_type, level=level)
            elif name in ("ul", "ol"):
                flush_loose()
                handle_list(child, level + 1)
            else:
                # text or tags sitting directly in the list become an item
                loose.append(child)
        flush_loose()

    def handle_block(el: Tag, style: str) -> None:
        name = (el.name or "").lower()
        if name in _SKIP_TAGS:
            return
        if name in _CONTAINER_TAGS:
            walk(el.children, style)
            return
        if name == "p":
            emit(el.children, style=style)
            return
        if name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
            emit(el.children, style=name)
            return
        if name == "blockquote":
            walk(el.children, "blockquote")
            return
        if name in {"ul", "ol"}:
            handle_list(el, 1)
            return
        if name == "li":
            emit(el.children, list_item="bullet", level=1)
            return
        if name == "pre":
            code_child = el.find("code")
            source = code_child if isinstance(code_child, Tag) else el
            emit(source.children, style=style, preserve_ws=True, marks=["code"])
            return
        if name in _TEXT_FALLBACK_TAGS:
            txt = _WS_RE.sub(" ", el.get_text(" ", strip=True).replace("\xa0", " "))
            if txt:
                blocks.append(block([span(txt)], style=style))
            return

        # Fallback: treat unknown blocks as paragraph text
        emit(el.children, style=style)

    def walk(children_iter, style: str) -> None:
        # Coalesce inline siblings into a single block; block elements break runs.
        inline_run: List[Any] = []

        def flush_inline_run() -> None:
            if inline_run:
                emit(list(inline_run), style=style)
                inline_run.clear()

        for child in children_iter:
            if _is_markup_only(child):
                continue
            if isinstance(child, NavigableString):
                inline_run.append(child)
                continue
            if isinstance(child, Tag) and (child.name or "").lower() in _INLINE_TAGS:
                inline_run.append(child)
                continue
            flush_inline_run()
            if isinstance(child, Tag):
                handle_block(child, style)
        flush_inline_run()

    walk(soup.children, "normal")

    return validate_blocks(blocks)
