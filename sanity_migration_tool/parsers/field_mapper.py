"""
Mapping of Webflow collection items to Sanity documents.

The mapping is pure: no network access, only the CPU-bound HTML to block
content conversion. Optional source fields that are absent never produce a
destination field, so the documents never carry ``null`` or empty blocks
that the Sanity schema would reject.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..models import AssetBlock, AssetRef, SanityDocument, Slug, WebflowItem
from .portable_text import convert_html_to_blocks

ID_PREFIX = "imported-"
DOCUMENT_TYPE = "exampleSchema"

# Removed as literal substrings only; every other tag passes through.
DESCRIPTION_TAGS = ("<br>", "<p>", "</p>")


def strip_description_tags(text: str) -> str:
    for tag in DESCRIPTION_TAGS:
        text = text.replace(tag, "")
    return text


def sanity_id_for(webflow_id: str, id_prefix: str = ID_PREFIX) -> str:
    """Deterministic Sanity ``_id`` for a Webflow item id, so re-runs overwrite."""
    return f"{id_prefix}{webflow_id}"


def map_to_sanity_document(
    webflow_item: Mapping[str, Any] | WebflowItem,
    *,
    id_prefix: str = ID_PREFIX,
    document_type: str = DOCUMENT_TYPE,
) -> Dict[str, Any]:
    """
    Map one Webflow item to the Sanity document shape.

    :param webflow_item: The raw item dictionary from the Webflow API, or an
        already validated :class:`WebflowItem`.
    :param id_prefix: Prefix added to the Webflow id to build ``_id``.
    :param document_type: Value of the ``_type`` tag.
    :return: The Sanity document as a plain dictionary. Image and file
        assets still carry their source URLs.
    :raises pydantic.ValidationError: if the item has no id.
    """
    item = webflow_item if isinstance(webflow_item, WebflowItem) else WebflowItem.model_validate(webflow_item)

    document = SanityDocument(
        id=sanity_id_for(item.id, id_prefix),
        doc_type=document_type,
        title=item.heading,
        description=strip_description_tags(item.description) if item.description is not None else None,
        slug=Slug(current=item.slug) if item.slug is not None else None,
        body=convert_html_to_blocks(item.rich_text) if item.rich_text is not None else None,
    )
    if item.image is not None and item.image.url:
        document.image = AssetBlock(asset=AssetRef(url=item.image.url), alt=item.image.alt or "")
    if item.file_url:
        document.file = AssetBlock(asset=AssetRef(url=item.file_url), alt="")

    return document.to_sanity_payload()
