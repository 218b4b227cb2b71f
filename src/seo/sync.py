"""
Keeps seo_manager entries in step with service and hire pages.

An entry is either independent (edited by hand in the SEO manager) or
auto-managed (owned by exactly one service/hire page, created, renamed and
deleted together with it).
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from aws_lambda_powertools import Logger
from content.repository import ContentRepository
from seo.repository import SeoRepository
from seo.schemas import LINK_FIELDS, LINKED_TABLES, LinkedType, SeoRecord

logger = Logger(service="seo-sync")


class SeoSyncError(Exception):
    """Raised when an entry cannot be synced without taking it from another page."""

    pass


class SeoDeleteOutcome(str, Enum):
    DELETED = "deleted"
    BLOCKED = "blocked"
    MISSING = "missing"


def default_meta_description(title: str) -> str:
    return f"Learn more about {title} - professional services and solutions"


def _same(current: Any, expected: Any) -> bool:
    if isinstance(expected, Enum):
        expected = expected.value
    if current is None or expected is None:
        return current is expected
    return str(current) == str(expected)


class SeoSyncService:
    def __init__(
        self,
        repo: Optional[SeoRepository] = None,
        content_repos: Optional[Dict[LinkedType, ContentRepository]] = None,
    ) -> None:
        self.repo = repo or SeoRepository()
        self._content_repos = dict(content_repos or {})

    def _content_repo(self, link_type: LinkedType) -> ContentRepository:
        if link_type not in self._content_repos:
            self._content_repos[link_type] = ContentRepository(LINKED_TABLES[link_type], client=self.repo.db)
        return self._content_repos[link_type]

    @staticmethod
    def _link_type(value: Union[str, LinkedType]) -> LinkedType:
        try:
            link_type = LinkedType(value)
        except ValueError:
            link_type = None
        if link_type not in LINK_FIELDS:
            raise ValueError(f"Invalid linked type provided: {value}")
        return link_type

    def sync_content(
        self,
        sub_category: Optional[str],
        slug: str,
        title: Optional[str] = None,
        link_type: Union[str, LinkedType] = LinkedType.SERVICE,
        linked_id: Any = None,
    ) -> dict:
        """
        Creates or updates the auto-managed entry of a service/hire page.

        Lookup order: by link to `linked_id`, then by `slug` (claims an
        independent entry with the same slug). Re-running with the same
        arguments writes nothing.

        Raises:
            ValueError: Invalid link type or missing linked_id.
            SeoSyncError: The slug belongs to an entry owned by another page.
        """
        link_type = self._link_type(link_type)
        if linked_id is None:
            raise ValueError("linked_id is required to sync SEO data")
        link_field = LINK_FIELDS[link_type]
        seo_title = sub_category or title

        existing = self.repo.get_by_link(link_field, linked_id)
        found_by_link = existing is not None
        if not existing:
            existing = self.repo.get_by_slug(slug)

        if not existing:
            logger.info("No SEO entry found, creating one", extra={"slug": slug, "linked_type": link_type.value})
            record = SeoRecord(
                title=seo_title,
                slug=slug,
                seo_keyphrase=seo_title,
                seo_title=seo_title,
                meta_description=default_meta_description(seo_title),
                cover_image="",
                linked_type=link_type,
                is_auto_managed=True,
                **{link_field: linked_id},
            )
            return self.repo.create(record.to_row())

        if not existing.get("is_auto_managed"):
            logger.info("Converting independent SEO entry to auto-managed", extra={"slug": slug})
            changes = {
                "title": seo_title,
                "slug": slug,
                "seo_title": seo_title,
                "linked_service": None,
                "linked_hire_page": None,
                link_field: linked_id,
                "linked_type": link_type.value,
                "is_auto_managed": True,
            }
            return self._apply(existing, changes)

        owned = _same(existing.get("linked_type"), link_type) and _same(existing.get(link_field), linked_id)
        if not owned:
            raise SeoSyncError(
                f"SEO slug '{slug}' is managed by another {existing.get('linked_type')} page"
            )
        if found_by_link and slug != existing.get("slug") and self.repo.slug_taken(slug, exclude_id=existing.get("id")):
            raise SeoSyncError(f"Another SEO entry already uses slug '{slug}'")

        return self._apply(existing, {"title": seo_title, "slug": slug})

    def _apply(self, existing: dict, changes: dict) -> dict:
        if all(_same(existing.get(k), v) for k, v in changes.items()):
            return existing
        merged = {**existing, **changes}
        SeoRecord.model_validate(merged)
        logger.info("Updating SEO entry", extra={"seo_id": existing.get("id"), "slug": merged.get("slug")})
        return self.repo.update(existing["id"], changes) or merged

    def force_delete(self, slug: str) -> bool:
        """Deletes the entry whatever its state; used when the owning page is deleted."""
        self.repo.delete_by_slug(slug)
        logger.info("SEO entry force deleted", extra={"slug": slug})
        return True

    def delete_for_content(
        self,
        link_type: Union[str, LinkedType],
        linked_id: Any,
        slug: Optional[str] = None,
    ) -> bool:
        """
        Deletes the auto-managed entry owned by a content page that is being deleted.

        The entry is found by its link to `linked_id`; `slug` is only a
        fallback and is used only when that entry is auto-managed for the
        same page. Independent entries are never deleted here.
        """
        link_type = self._link_type(link_type)
        link_field = LINK_FIELDS[link_type]

        entry = self.repo.get_by_link(link_field, linked_id) if linked_id is not None else None
        if not entry and slug:
            entry = self.repo.get_by_slug(slug)
        if not entry:
            logger.info("No SEO entry to delete", extra={"slug": slug, "linked_id": linked_id})
            return False

        owned = (
            entry.get("is_auto_managed")
            and _same(entry.get("linked_type"), link_type)
            and _same(entry.get(link_field), linked_id)
        )
        if not owned:
            logger.warning(
                "SEO entry not owned by the deleted page, keeping it",
                extra={"slug": entry.get("slug"), "linked_type": link_type.value, "linked_id": linked_id},
            )
            return False
        return self.force_delete(entry["slug"])

    def safe_delete(self, slug: str) -> SeoDeleteOutcome:
        """Deletes independent entries only; auto-managed ones are BLOCKED."""
        entry = self.repo.get_by_slug(slug)
        if not entry:
            return SeoDeleteOutcome.MISSING
        if entry.get("is_auto_managed"):
            logger.info("Blocked deletion of auto-managed SEO entry", extra={"slug": slug})
            return SeoDeleteOutcome.BLOCKED
        self.repo.delete_by_slug(slug)
        return SeoDeleteOutcome.DELETED

    def update_linked_entity(self, old_slug: str, new_slug: str, new_title: str) -> Optional[dict]:
        """
        Pushes a renamed auto-managed entry back onto its service/hire page
        (slug and sub_category). Returns the updated page, or None when the
        entry is independent or unknown.
        """
        entry = self.repo.get_by_slug(old_slug)
        if not entry and new_slug and new_slug != old_slug:
            entry = self.repo.get_by_slug(new_slug)
        if not entry or not entry.get("is_auto_managed"):
            return None
        try:
            link_type = self._link_type(entry.get("linked_type"))
        except ValueError:
            return None
        linked_id = entry.get(LINK_FIELDS[link_type])
        if linked_id is None:
            return None

        updated = self._content_repo(link_type).update(linked_id, {"slug": new_slug, "sub_category": new_title})
        logger.info(
            "Linked page updated from SEO entry",
            extra={"linked_type": link_type.value, "linked_id": linked_id, "slug": new_slug},
        )
        return updated
