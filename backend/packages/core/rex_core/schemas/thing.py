"""
Thing schemas.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .common import Category, ThingSource, UTCDateTime


class ThingCreate(BaseModel):
    """Thing creation request, usually populated from an external metadata lookup."""

    title: str = Field(max_length=500)
    category: Category
    description: str | None = None
    image: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    source: ThingSource = ThingSource.MANUAL
    source_id: str | None = Field(default=None, max_length=255)

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class ThingResponse(BaseModel):
    """Thing response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    category: Category
    description: str | None = None
    image: str | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("item_metadata", "metadata")
    )
    source: ThingSource = ThingSource.MANUAL
    source_id: str | None = None
    created_by: str | None = None
    created_at: UTCDateTime
