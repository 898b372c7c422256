from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WebflowImage(BaseModel):
    url: Optional[str] = None
    alt: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class WebflowItem(BaseModel):
    """A Webflow CMS collection item, restricted to the fields the migration reads.

    Every consumed field except the id is optional; absence is legal and is
    carried through to the Sanity document as an omitted field.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    id: str = Field(..., alias="_id", min_length=1)
    heading: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    rich_text: Optional[str] = Field(None, alias="rich-text")
    image: Optional[WebflowImage] = None
    file_url: Optional[str] = Field(None, alias="file-url")

    @field_validator("image", mode="before")
    @classmethod
    def _drop_empty_image(cls, v):
        # Webflow sends null or an empty object for unset image fields.
        if not isinstance(v, dict) or not v.get("url"):
            return None
        return v

    @field_validator("file_url", mode="before")
    @classmethod
    def _blank_file_url(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
