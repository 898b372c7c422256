from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssetRef(BaseModel):
    """Either a fetchable ``url`` (before upload) or a ``_ref`` to a Sanity asset."""

    url: Optional[str] = None
    ref_type: Optional[str] = Field(None, alias="_type")
    ref: Optional[str] = Field(None, alias="_ref")

    model_config = ConfigDict(populate_by_name=True)


class AssetBlock(BaseModel):
    asset: AssetRef
    alt: str = ""


class Slug(BaseModel):
    current: str


class SanityDocument(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    id: str = Field(..., alias="_id", min_length=1)
    doc_type: str = Field(..., alias="_type", min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    slug: Optional[Slug] = None
    body: Optional[list[dict[str, Any]]] = None
    image: Optional[AssetBlock] = None
    file: Optional[AssetBlock] = None

    def to_sanity_payload(self) -> dict[str, Any]:
        # exclude_none keeps unset optional blocks out of the document entirely
        return self.model_dump(by_alias=True, exclude_none=True)
