import math
from typing import Any, Optional

from aws_lambda_powertools import Logger

from content.repository import ContentRepository
from image_cleanup.service import ImageCleanupService
from seo.repository import SeoRepository
from seo.schemas import LINK_FIELDS, LINKED_TABLES, LinkedType, SeoInput, SeoUpdate
from seo.sync import SeoDeleteOutcome, SeoSyncService
from shared.errors import SlugConflictError

logger = Logger(service="seo-manager")

RECORD_TYPE = "SeoManager"
HOME_SLUG = "home"
NAVBAR_TABLE = "navbar_group_tab_images"


class AutoManagedSeoError(ValueError):
    """Raised when an operator tries to delete an entry owned by a service/hire page."""

    pass


class SeoManagerService:
    """Operator-facing SEO metadata management."""

    def __init__(
        self,
        repo: Optional[SeoRepository] = None,
        sync: Optional[SeoSyncService] = None,
        images: Optional[ImageCleanupService] = None,
    ):
        self.repo = repo or SeoRepository()
        self.sync = sync or SeoSyncService(repo=self.repo)
        self.images = images or ImageCleanupService()

    def create_entry(self, payload: SeoInput) -> Optional[dict]:
        """New entries are independent until a service/hire page claims them."""
        if self.repo.slug_taken(payload.slug):
            raise SlugConflictError("SEO with this slug already exists")
        data = payload.model_dump(mode="json")
        data.update({"linked_type": LinkedType.INDEPENDENT.value, "is_auto_managed": False})
        return self.repo.create(data)

    def list_entries(self, page: int = 1, limit: int = 10, search: Optional[str] = None) -> dict:
        start = (page - 1) * limit
        end = start + limit - 1
        data, total = self.repo.list_paginated(start, end, search)
        return {
            "data": data,
            "pagination": {
                "current": page,
                "pages": math.ceil(total / limit) if limit else 0,
                "total": total,
            },
        }

    def get_by_slug(self, slug: str) -> Optional[dict]:
        """Falls back to the home page entry when the slug is unknown."""
        entry = self.repo.get_by_slug(slug)
        if not entry and slug != HOME_SLUG:
            logger.warning("SEO data not found, falling back to homepage", extra={"slug": slug})
            entry = self.repo.get_by_slug(HOME_SLUG)
        return entry

    def update_entry(self, seo_id: Any, payload: SeoUpdate) -> Optional[dict]:
        current = self.repo.get_by_id(seo_id)
        if not current:
            return None

        if payload.slug and payload.slug != current.get("slug") and self.repo.slug_taken(payload.slug, exclude_id=seo_id):
            raise SlugConflictError("Another SEO with this slug already exists")

        # empty values keep the stored ones
        changes = {k: v for k, v in payload.model_dump().items() if v}
        merged = {**current, **changes}

        self.images.cleanup_changed(current, merged, RECORD_TYPE)
        updated = self.repo.update(seo_id, changes) if changes else current
        updated = updated or merged

        old_slug, old_title = current.get("slug"), current.get("title")
        renamed = updated.get("slug") != old_slug or updated.get("title") != old_title
        if current.get("is_auto_managed") and renamed:
            try:
                linked = self.sync.update_linked_entity(old_slug, updated.get("slug"), updated.get("title"))
                if linked:
                    logger.info(
                        "Updated linked page",
                        extra={"linked_type": current.get("linked_type"), "linked_id": linked.get("id")},
                    )
            except Exception as e:
                logger.warning(f"Linked entity update warning: {e}", extra={"seo_id": seo_id})
        return updated

    def delete_entry(self, seo_id: Any) -> Optional[bool]:
        """
        Deletes an independent entry and its cover image.

        Raises:
            AutoManagedSeoError: The entry belongs to a service/hire page.
        """
        current = self.repo.get_by_id(seo_id)
        if not current:
            return None

        outcome = self.sync.safe_delete(current["slug"])
        if outcome is SeoDeleteOutcome.BLOCKED:
            raise AutoManagedSeoError(
                f"Cannot delete auto-managed SEO entry. This entry is linked to a "
                f"{current.get('linked_type')} page. Delete the linked page instead."
            )
        self.images.cleanup_all(current, RECORD_TYPE)
        return True

    def navigation_structure(self, content_repos: Optional[dict] = None, navbar_repo: Optional[ContentRepository] = None) -> dict:
        """
        Builds the site navigation from SEO entries.

        mainNav holds independent pages; servicesNav / hireNav group linked
        entries by the category of their page, with the group icon taken from
        the navbar image linked to one of the group's pages.
        """
        content_repos = content_repos or {
            t: ContentRepository(table, client=self.repo.db) for t, table in LINKED_TABLES.items()
        }
        navbar_repo = navbar_repo or ContentRepository(NAVBAR_TABLE, client=self.repo.db)

        entries = self.repo.list_all()
        navbar_images = navbar_repo.find_all()
        icons = {LinkedType.SERVICE: {}, LinkedType.HIRE: {}}
        for item in navbar_images:
            if item.get("linked_service") is not None:
                icons[LinkedType.SERVICE][str(item["linked_service"])] = item.get("image") or ""
            if item.get("linked_hire_page") is not None:
                icons[LinkedType.HIRE][str(item["linked_hire_page"])] = item.get("image") or ""

        main_nav = [
            {"title": e.get("title"), "slug": e.get("slug"), "linkedType": LinkedType.INDEPENDENT.value}
            for e in entries
            if e.get("linked_type") in (None, LinkedType.INDEPENDENT.value)
        ]
        return {
            "mainNav": main_nav,
            "servicesNav": self._group_by_category(entries, LinkedType.SERVICE, content_repos, icons),
            "hireNav": self._group_by_category(entries, LinkedType.HIRE, content_repos, icons),
        }

    @staticmethod
    def _group_by_category(entries, link_type: LinkedType, content_repos: dict, icons: dict) -> list:
        link_field = LINK_FIELDS[link_type]
        pages = {str(p.get("id")): p for p in content_repos[link_type].find_all("id, category")}

        groups = {}
        for entry in entries:
            if entry.get("linked_type") != link_type.value:
                continue
            page_id = entry.get(link_field)
            page = pages.get(str(page_id)) if page_id is not None else None
            if not page or not page.get("category"):
                continue
            group = groups.setdefault(page["category"], {"category": page["category"], "icon": "", "links": []})
            group["links"].append({"title": entry.get("title"), "slug": entry.get("slug")})
            if not group["icon"]:
                group["icon"] = icons[link_type].get(str(page_id), "")
        return list(groups.values())
