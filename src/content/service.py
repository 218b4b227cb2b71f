from typing import Any, Optional, Type, Union

from aws_lambda_powertools import Logger
from pydantic import BaseModel

from content.repository import ContentRepository
from content.schemas import ContentInput, HirePageInput, ServicePageInput, SluggedContentInput
from image_cleanup.service import ImageCleanupService
from seo.schemas import LinkedType
from seo.sync import SeoSyncService
from shared.errors import DuplicateContentError, SlugConflictError

logger = Logger(service="content")

Payload = Union[dict, BaseModel]


def _as_dict(payload: Payload) -> dict:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", exclude_none=True)
    return dict(payload)


class ContentService:
    """
    CRUD over one content table with image cleanup.

    Updates replace whole top-level fields: the stored row is merged with the
    payload, and images the merged row no longer references are deleted
    before the write.
    """

    input_model: Type[BaseModel] = ContentInput

    def __init__(
        self,
        record_type: str,
        repo: Optional[ContentRepository] = None,
        images: Optional[ImageCleanupService] = None,
    ):
        self.record_type = record_type
        self.repo = repo or ContentRepository.for_record_type(record_type)
        self.images = images or ImageCleanupService()

    def _validate(self, payload: Payload) -> dict:
        if isinstance(payload, self.input_model):
            return _as_dict(payload)
        return _as_dict(self.input_model.model_validate(_as_dict(payload)))

    def list_records(self, page: int, limit: int, filters: dict = None):
        start = (page - 1) * limit
        end = start + limit - 1

        data, total = self.repo.get_paginated(start, end, filters)
        total = total or 0

        has_next = (page * limit) < total
        next_page = (page + 1) if has_next else None

        return {
            "data": data or [],
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "nextPage": next_page,
            },
        }

    def get_record(self, record_id: Any):
        return self.repo.get_by_id(record_id)

    def create_record(self, payload: Payload):
        data = self._validate(payload)
        return self.repo.create(data)

    def update_record(self, record_id: Any, payload: Payload):
        current = self.repo.get_by_id(record_id)
        if not current:
            return None
        data = self._validate(payload)
        self._before_update(record_id, current, data)

        self.images.cleanup_changed(current, {**current, **data}, self.record_type)
        updated = self.repo.update(record_id, data)
        if updated:
            self._after_update(current, updated)
        return updated

    def delete_record(self, record_id: Any):
        current = self.repo.get_by_id(record_id)
        if not current:
            return None
        self.images.cleanup_all(current, self.record_type)
        self._before_delete(current)
        return self.repo.delete(record_id)

    def _before_update(self, record_id: Any, current: dict, data: dict) -> None:
        pass

    def _after_update(self, previous: dict, updated: dict) -> None:
        pass

    def _before_delete(self, current: dict) -> None:
        pass


class SluggedContentService(ContentService):
    """Content with a public slug and an auto-managed SEO entry."""

    input_model: Type[BaseModel] = SluggedContentInput
    link_type: LinkedType = LinkedType.SERVICE
    title_field = "title"

    def __init__(
        self,
        record_type: str,
        repo: Optional[ContentRepository] = None,
        images: Optional[ImageCleanupService] = None,
        seo_sync: Optional[SeoSyncService] = None,
    ):
        super().__init__(record_type, repo=repo, images=images)
        self._seo_sync = seo_sync

    @property
    def seo_sync(self) -> SeoSyncService:
        if self._seo_sync is None:
            self._seo_sync = SeoSyncService()
        return self._seo_sync

    def create_record(self, payload: Payload):
        data = self._validate(payload)
        if self.repo.slug_taken(data["slug"]):
            raise SlugConflictError("Slug already exists, please choose another one")
        if self.repo.find_one(category=data["category"], sub_category=data["sub_category"]):
            raise DuplicateContentError("A page already exists for this category and sub category")

        created = self.repo.create(data)
        if created:
            self._sync_seo(created)
        return created

    def _before_update(self, record_id: Any, current: dict, data: dict) -> None:
        slug = data.get("slug")
        if slug and slug != current.get("slug") and self.repo.slug_taken(slug, exclude_id=record_id):
            raise SlugConflictError("Slug already exists. Please use a different one.")

    def _after_update(self, previous: dict, updated: dict) -> None:
        if previous.get("slug") != updated.get("slug") or previous.get("sub_category") != updated.get("sub_category"):
            self._sync_seo(updated)

    def _before_delete(self, current: dict) -> None:
        try:
            self.seo_sync.delete_for_content(self.link_type, current.get("id"), current.get("slug"))
        except Exception as e:
            logger.warning(f"SEO delete warning: {e}", extra={"record_type": self.record_type, "slug": current.get("slug")})

    def _sync_seo(self, record: dict) -> None:
        try:
            self.seo_sync.sync_content(
                record.get("sub_category"),
                record.get("slug"),
                record.get(self.title_field),
                self.link_type,
                record.get("id"),
            )
        except Exception as e:
            # the page write already succeeded; SEO is reconciled on the next rename
            logger.warning(f"SEO sync warning: {e}", extra={"record_type": self.record_type, "slug": record.get("slug")})


class ServicePageService(SluggedContentService):
    input_model = ServicePageInput
    link_type = LinkedType.SERVICE
    title_field = "main_title"

    def __init__(self, repo=None, images=None, seo_sync=None):
        super().__init__("Service", repo=repo, images=images, seo_sync=seo_sync)


class HirePageService(SluggedContentService):
    input_model = HirePageInput
    link_type = LinkedType.HIRE
    title_field = "title"

    def __init__(self, repo=None, images=None, seo_sync=None):
        super().__init__("HirePageData", repo=repo, images=images, seo_sync=seo_sync)
