"""
One-off migration: classifies existing seo_manager rows as independent or
auto-managed.

Run with: python -m seo.migration (SUPABASE_URL / SUPABASE_KEY set).
"""

from typing import Dict, Optional

from aws_lambda_powertools import Logger
from content.repository import ContentRepository
from seo.repository import SeoRepository
from seo.schemas import LINK_FIELDS, LINKED_TABLES, LinkedType

logger = Logger(service="seo-migration")

# Fixed site pages, always edited by hand.
INDEPENDENT_SLUGS = [
    "home", "about-us", "our-services", "hire", "our-portfolio",
    "career", "training", "blog", "contact",
]

INDEPENDENT_STATE = {
    "is_auto_managed": False,
    "linked_type": LinkedType.INDEPENDENT.value,
    "linked_service": None,
    "linked_hire_page": None,
}


def mark_independent_seo(
    seo_repo: Optional[SeoRepository] = None,
    content_repos: Optional[Dict[LinkedType, ContentRepository]] = None,
) -> Dict[str, int]:
    """Returns counts per classification step."""
    seo_repo = seo_repo or SeoRepository()
    content_repos = content_repos or {
        t: ContentRepository(table, client=seo_repo.db) for t, table in LINKED_TABLES.items()
    }

    independent = seo_repo.update_by_slugs(INDEPENDENT_SLUGS, INDEPENDENT_STATE)
    logger.info(f"Marked {independent} independent pages")

    linked = {}
    for link_type in (LinkedType.SERVICE, LinkedType.HIRE):
        count = 0
        for page in content_repos[link_type].find_all("id, slug, sub_category"):
            entry = seo_repo.get_by_slug(page.get("slug")) if page.get("slug") else None
            if not entry:
                continue
            state = {
                "is_auto_managed": True,
                "linked_type": link_type.value,
                "linked_service": None,
                "linked_hire_page": None,
                LINK_FIELDS[link_type]: page["id"],
            }
            seo_repo.update(entry["id"], state)
            count += 1
            logger.info(
                f"Linked SEO '{entry.get('title')}' to {link_type.value} '{page.get('sub_category')}'"
            )
        linked[link_type.value] = count
        logger.info(f"Linked {count} SEO entries to {link_type.value} pages")

    remaining = seo_repo.update_unclassified({"is_auto_managed": False, "linked_type": LinkedType.INDEPENDENT.value})
    logger.info(f"Marked {remaining} remaining entries as independent")

    return {
        "independent": independent,
        "service": linked[LinkedType.SERVICE.value],
        "hire": linked[LinkedType.HIRE.value],
        "remaining": remaining,
    }


def main() -> None:
    try:
        summary = mark_independent_seo()
    except Exception:
        logger.exception("SEO migration failed")
        raise
    logger.info("SEO migration completed", extra=summary)


if __name__ == "__main__":
    main()
