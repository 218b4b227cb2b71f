from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class LinkedType(str, Enum):
    SERVICE = "service"
    HIRE = "hire"
    INDEPENDENT = "independent"


# link type -> seo_manager column holding the content row id
LINK_FIELDS = {
    LinkedType.SERVICE: "linked_service",
    LinkedType.HIRE: "linked_hire_page",
}

# link type -> content table the link points to
LINKED_TABLES = {
    LinkedType.SERVICE: "services",
    LinkedType.HIRE: "hire_pages",
}


class SeoInput(BaseModel):
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    seo_keyphrase: str = ""
    seo_title: str = ""
    meta_description: str = ""
    cover_image: str = ""


class SeoUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    seo_keyphrase: Optional[str] = None
    seo_title: Optional[str] = None
    meta_description: Optional[str] = None
    cover_image: Optional[str] = None


class SeoRecord(BaseModel):
    """
    A seo_manager row.

    Invariant: is_auto_managed <=> linked_type in (service, hire) <=> exactly
    the link column matching linked_type is set.
    """

    id: Optional[Any] = None
    title: str
    slug: str
    seo_keyphrase: str = ""
    seo_title: str = ""
    meta_description: str = ""
    cover_image: str = ""
    linked_service: Optional[Any] = None
    linked_hire_page: Optional[Any] = None
    linked_type: LinkedType = LinkedType.INDEPENDENT
    is_auto_managed: bool = False

    @model_validator(mode="after")
    def check_link_state(self) -> "SeoRecord":
        links = {
            LinkedType.SERVICE: self.linked_service,
            LinkedType.HIRE: self.linked_hire_page,
        }
        if self.linked_type is LinkedType.INDEPENDENT:
            if self.is_auto_managed or any(v is not None for v in links.values()):
                raise ValueError("Independent SEO entries cannot be auto-managed or linked")
            return self
        if not self.is_auto_managed:
            raise ValueError(f"SEO entries linked to a {self.linked_type.value} page must be auto-managed")
        if links[self.linked_type] is None:
            raise ValueError(f"SEO entry of type {self.linked_type.value} has no linked record")
        if any(v is not None for t, v in links.items() if t is not self.linked_type):
            raise ValueError("SEO entry is linked to more than one record")
        return self

    def to_row(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"})
