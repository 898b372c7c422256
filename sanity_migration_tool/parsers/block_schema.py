from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional


BLOCK_STYLES = ("normal", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")
LIST_TYPES = ("bullet", "number")


def random_key(length: int = 12) -> str:
    return uuid.uuid4().hex[:length]


# --- Builders for Portable Text nodes ---

def span(text: str, marks: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "_type": "span",
        "_key": random_key(),
        "text": text or "",
        "marks": list(marks or []),
    }


def link_def(href: str) -> Dict[str, Any]:
    return {"_type": "link", "_key": random_key(), "href": href}


def block(
    children: Optional[List[Dict[str, Any]]] = None,
    *,
    style: str = "normal",
    mark_defs: Optional[List[Dict[str, Any]]] = None,
    list_item: Optional[str] = None,
    level: Optional[int] = None,
) -> Dict[str, Any]:
    node: Dict[str, Any] = {
        "_type": "block",
        "_key": random_key(),
        "style": style if style in BLOCK_STYLES else "normal",
        "markDefs": mark_defs or [],
        "children": children or [],
    }
    if list_item:
        node["listItem"] = list_item if list_item in LIST_TYPES else "bullet"
        node["level"] = max(1, int(level or 1))
    return node


def block_text(node: Dict[str, Any]) -> str:
    """Plain text of a block, concatenating its spans."""
    return "".join(c.get("text", "") for c in node.get("children", []) if c.get("_type") == "span")


# --- Minimal validator/normalizer ---

def validate_blocks(blocks: Any) -> List[Dict[str, Any]]:
    """
    Ensure a body value follows the single-type block array schema.
    - The body is a list; anything else becomes an empty body.
    - Stray spans are wrapped in a ``normal`` block.
    - Unknown styles fall back to ``normal`` and list blocks get a level.
    - Every node carries a ``_key``.
    """
    if not isinstance(blocks, list):
        return []

    fixed: List[Dict[str, Any]] = []
    for n in blocks:
        if not isinstance(n, dict):
            continue
        t = n.get("_type")
        if t == "span":
            fixed.append(block([n]))
            continue
        if t != "block":
            continue
        if n.get("style") not in BLOCK_STYLES:
            n["style"] = "normal"
        if "listItem" in n:
            if n["listItem"] not in LIST_TYPES:
                n["listItem"] = "bullet"
            if not isinstance(n.get("level"), int) or n["level"] < 1:
                n["level"] = 1
        n.setdefault("markDefs", [])
        n.setdefault("children", [])
        n.setdefault("_key", random_key())
        fixed.append(n)
    return fixed
