from unittest.mock import MagicMock

from seo.repository import SeoRepository


def _chain(client: MagicMock) -> MagicMock:
    """Makes every builder method return the same query mock."""
    query = MagicMock()
    client.table.return_value = query
    for method in ("select", "eq", "neq", "limit", "order", "range", "or_",
                   "insert", "update", "delete", "in_", "is_"):
        getattr(query, method).return_value = query
    return query


class TestSeoRepository:
    """Supabase query building for seo_manager."""

    def test_get_by_slug_returns_first_row(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = [{"id": 1, "slug": "home"}]

        result = SeoRepository(client=supabase_client).get_by_slug("home")

        supabase_client.table.assert_called_once_with("seo_manager")
        query.eq.assert_called_once_with("slug", "home")
        assert result == {"id": 1, "slug": "home"}

    def test_get_by_link_returns_none_when_empty(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = []

        assert SeoRepository(client=supabase_client).get_by_link("linked_service", 5) is None
        query.eq.assert_called_once_with("linked_service", 5)

    def test_slug_taken_excludes_current_row(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = [{"id": 2}]

        assert SeoRepository(client=supabase_client).slug_taken("blog", exclude_id=1) is True
        query.neq.assert_called_once_with("id", 1)

    def test_list_paginated_with_search(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = [{"id": 1}]
        query.execute.return_value.count = 21

        data, total = SeoRepository(client=supabase_client).list_paginated(10, 19, "react")

        query.select.assert_called_once_with("*", count="exact")
        or_filter = query.or_.call_args[0][0]
        assert "title.ilike.*react*" in or_filter
        assert "meta_description.ilike.*react*" in or_filter
        query.order.assert_called_once_with("created_at", desc=True)
        query.range.assert_called_once_with(10, 19)
        assert data == [{"id": 1}]
        assert total == 21

    def test_update_unclassified_filters_null_linked_type(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = [{"id": 1}, {"id": 2}]

        count = SeoRepository(client=supabase_client).update_unclassified({"linked_type": "independent"})

        query.update.assert_called_once_with({"linked_type": "independent"})
        query.is_.assert_called_once_with("linked_type", "null")
        assert count == 2

    def test_delete_by_slug(self, supabase_client: MagicMock) -> None:
        query = _chain(supabase_client)
        query.execute.return_value.data = [{"id": 1}]

        assert SeoRepository(client=supabase_client).delete_by_slug("old") is True
        query.delete.assert_called_once()
        query.eq.assert_called_once_with("slug", "old")
