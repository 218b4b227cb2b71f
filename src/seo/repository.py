from typing import List, Optional

from shared.database import get_supabase_client

SEARCH_COLUMNS = ("title", "slug", "seo_keyphrase", "seo_title", "meta_description")


class SeoRepository:
    """Supabase access for the seo_manager table."""

    TABLE = "seo_manager"

    def __init__(self, client=None):
        self.db = client if client is not None else get_supabase_client()

    def _one(self, column: str, value) -> Optional[dict]:
        res = self.db.table(self.TABLE).select("*").eq(column, value).limit(1).execute()
        return res.data[0] if res.data else None

    def get_by_id(self, seo_id) -> Optional[dict]:
        return self._one("id", seo_id)

    def get_by_slug(self, slug: str) -> Optional[dict]:
        return self._one("slug", slug)

    def get_by_link(self, link_field: str, linked_id) -> Optional[dict]:
        return self._one(link_field, linked_id)

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        query = self.db.table(self.TABLE).select("id").eq("slug", slug)
        if exclude_id is not None:
            query = query.neq("id", exclude_id)
        res = query.limit(1).execute()
        return bool(res.data)

    def list_paginated(self, start: int, end: int, search: Optional[str] = None):
        query = self.db.table(self.TABLE).select("*", count="exact")
        if search:
            # PostgREST or-filter: col.ilike.*term*,col2.ilike.*term*
            term = search.replace(",", " ")
            query = query.or_(",".join(f"{col}.ilike.*{term}*" for col in SEARCH_COLUMNS))
        res = query.order("created_at", desc=True).range(start, end).execute()
        return res.data or [], res.count or 0

    def list_all(self) -> List[dict]:
        res = self.db.table(self.TABLE).select("*").execute()
        return res.data or []

    def create(self, data: dict) -> Optional[dict]:
        res = self.db.table(self.TABLE).insert(data).execute()
        return res.data[0] if res.data else None

    def update(self, seo_id, data: dict) -> Optional[dict]:
        res = self.db.table(self.TABLE).update(data).eq("id", seo_id).execute()
        return res.data[0] if res.data else None

    def update_by_slugs(self, slugs: List[str], data: dict) -> int:
        res = self.db.table(self.TABLE).update(data).in_("slug", slugs).execute()
        return len(res.data or [])

    def update_unclassified(self, data: dict) -> int:
        """Updates rows that were never classified (linked_type is NULL)."""
        res = self.db.table(self.TABLE).update(data).is_("linked_type", "null").execute()
        return len(res.data or [])

    def delete_by_slug(self, slug: str) -> bool:
        res = self.db.table(self.TABLE).delete().eq("slug", slug).execute()
        return bool(res.data)
