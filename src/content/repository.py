from shared.database import get_supabase_client

# record type -> table
CONTENT_TABLES = {
    "Testimonial": "testimonials",
    "ExpertiseIndustry": "expertise_industries",
    "EngagementModel": "engagement_models",
    "CreativeWork": "creative_works",
    "ServiceTechnologyList": "service_technologies",
    "OurServicesMain": "our_services_main",
    "Service": "services",
    "HomeChooseIts": "home_choose_its",
    "HirePageData": "hire_pages",
    "OpenningPosition": "opening_positions",
    "CareerContent": "career_content",
    "Blog": "blogs",
    "AboutUs": "about_us",
    "NavbarGroupTabImageManage": "navbar_group_tab_images",
    "User": "users",
    "HireMainPageData": "hire_main_page",
    "PortfolioContent": "portfolio_content",
    "TrainingMainPageData": "training_main_page",
    "HomePageData": "home_page",
}


class ContentRepository:
    """Supabase access for one content table (nested sections live in jsonb columns)."""

    def __init__(self, table: str, client=None):
        self.table = table
        self.db = client if client is not None else get_supabase_client()

    @classmethod
    def for_record_type(cls, record_type: str, client=None) -> "ContentRepository":
        table = CONTENT_TABLES.get(record_type)
        if not table:
            raise ValueError(f"Unknown record type: {record_type}")
        return cls(table, client=client)

    def get_by_id(self, record_id):
        res = self.db.table(self.table).select("*").eq("id", record_id).execute()
        return res.data[0] if res.data else None

    def find_one(self, **filters):
        query = self.db.table(self.table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        res = query.limit(1).execute()
        return res.data[0] if res.data else None

    def find_all(self, columns: str = "*"):
        res = self.db.table(self.table).select(columns).execute()
        return res.data or []

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        query = self.db.table(self.table).select("id").eq("slug", slug)
        if exclude_id is not None:
            query = query.neq("id", exclude_id)
        res = query.limit(1).execute()
        return bool(res.data)

    def get_paginated(self, start: int, end: int, filters: dict = None):
        query = self.db.table(self.table).select("*", count="exact")

        if filters:
            if filters.get("search"):
                column = filters.get("search_field") or "title"
                query = query.ilike(column, f"%{filters['search']}%")
            if filters.get("category"):
                query = query.eq("category", filters["category"])

        res = query.order("created_at", desc=True).range(start, end).execute()
        return res.data, res.count

    def create(self, data: dict):
        res = self.db.table(self.table).insert(data).execute()
        return res.data[0] if res.data else None

    def update(self, record_id, data: dict):
        data = {k: v for k, v in data.items() if k != "id"}
        res = self.db.table(self.table).update(data).eq("id", record_id).execute()
        return res.data[0] if res.data else None

    def delete(self, record_id):
        res = self.db.table(self.table).delete().eq("id", record_id).execute()
        return res.data
