"""
Parsers and converters used by the migration pipeline.

This subpackage exposes ``convert_html_to_blocks`` from
:mod:`sanity_migration_tool.parsers.portable_text` and the Webflow item
mapper ``map_to_sanity_document``.
"""

from .field_mapper import map_to_sanity_document, strip_description_tags
from .portable_text import convert_html_to_blocks

__all__ = ["convert_html_to_blocks", "map_to_sanity_document", "strip_description_tags"]
