"""
Pydantic models for the records moving through the pipeline.

* :class:`WebflowItem` – a source collection item with explicit optional fields
* :class:`SanityDocument` – the destination document shape
"""

from .sanity_document import AssetBlock, AssetRef, SanityDocument, Slug
from .webflow_item import WebflowImage, WebflowItem

__all__ = [
    "AssetBlock",
    "AssetRef",
    "SanityDocument",
    "Slug",
    "WebflowImage",
    "WebflowItem",
]
