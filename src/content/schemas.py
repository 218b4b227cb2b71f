from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentInput(BaseModel):
    """Generic content payload; nested sections pass through untouched."""

    model_config = ConfigDict(extra="allow")


class SluggedContentInput(ContentInput):
    category: str = Field(..., min_length=1)
    sub_category: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Slug is required")
        return value


class ServicePageInput(SluggedContentInput):
    main_title: str = Field(..., min_length=1)
    description: Optional[str] = None


class HirePageInput(SluggedContentInput):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
