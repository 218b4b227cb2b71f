import itertools
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from seo.schemas import LinkedType
from seo.sync import SeoSyncService


class InMemorySeoRepository:
    """Dict-backed stand-in for SeoRepository with the same method surface."""

    def __init__(self) -> None:
        self.rows: Dict[int, dict] = {}
        self.db = MagicMock()
        self.writes = 0
        self._ids = itertools.count(1)

    def add(self, **row) -> dict:
        row.setdefault("seo_keyphrase", "")
        row.setdefault("seo_title", "")
        row.setdefault("meta_description", "")
        row.setdefault("cover_image", "")
        row.setdefault("linked_service", None)
        row.setdefault("linked_hire_page", None)
        row.setdefault("linked_type", "independent")
        row.setdefault("is_auto_managed", False)
        row["id"] = next(self._ids)
        self.rows[row["id"]] = row
        return dict(row)

    def _find(self, column, value) -> Optional[dict]:
        for row in self.rows.values():
            if row.get(column) == value:
                return dict(row)
        return None

    def get_by_id(self, seo_id):
        row = self.rows.get(seo_id)
        return dict(row) if row else None

    def get_by_slug(self, slug):
        return self._find("slug", slug)

    def get_by_link(self, link_field, linked_id):
        return self._find(link_field, linked_id)

    def slug_taken(self, slug, exclude_id=None) -> bool:
        return any(r["slug"] == slug and r["id"] != exclude_id for r in self.rows.values())

    def list_all(self) -> List[dict]:
        return [dict(r) for r in self.rows.values()]

    def list_paginated(self, start, end, search=None):
        rows = self.list_all()
        return rows[start:end + 1], len(rows)

    def create(self, data: dict) -> dict:
        self.writes += 1
        return self.add(**data)

    def update(self, seo_id, data: dict) -> Optional[dict]:
        if seo_id not in self.rows:
            return None
        self.writes += 1
        self.rows[seo_id].update(data)
        return dict(self.rows[seo_id])

    def update_by_slugs(self, slugs, data) -> int:
        matched = [r for r in self.rows.values() if r["slug"] in slugs]
        for row in matched:
            row.update(data)
        return len(matched)

    def update_unclassified(self, data) -> int:
        matched = [r for r in self.rows.values() if r.get("linked_type") is None]
        for row in matched:
            row.update(data)
        return len(matched)

    def delete_by_slug(self, slug) -> bool:
        for seo_id, row in list(self.rows.items()):
            if row["slug"] == slug:
                self.writes += 1
                del self.rows[seo_id]
                return True
        return False


@pytest.fixture
def seo_repo() -> InMemorySeoRepository:
    return InMemorySeoRepository()


@pytest.fixture
def content_repos() -> Dict[LinkedType, MagicMock]:
    return {LinkedType.SERVICE: MagicMock(), LinkedType.HIRE: MagicMock()}


@pytest.fixture
def sync(seo_repo, content_repos) -> SeoSyncService:
    return SeoSyncService(repo=seo_repo, content_repos=content_repos)
