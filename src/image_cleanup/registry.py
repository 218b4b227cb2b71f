from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from image_cleanup.paths import parse_path

# Where image references live inside each record type.
IMAGE_PATHS: Dict[str, Tuple[str, ...]] = {
    "Testimonial": ("image",),
    "ExpertiseIndustry": ("image",),
    "EngagementModel": ("model_image",),
    "SeoManager": ("cover_image",),
    "CreativeWork": ("image",),
    "ServiceTechnologyList": ("image",),
    "OurServicesMain": (
        "hero_section.image",
        "hero_section.points[].image",
        "technology_details.image",
        "technology_details.technology_detail[].image",
        "technology_details.development_detail[].image",
    ),
    "Service": (
        "content_blocks[].image",
        "why_work_with_this.image",
        "why_company_prefers_this.content[].image",
    ),
    "HomeChooseIts": ("image",),
    "HirePageData": (
        "success_speaks.image",
        "hire_dedicated.image",
        "unlock_power.image",
    ),
    "OpenningPosition": ("image",),
    "CareerContent": (
        "hero_section.image",
        "career_at_its.image",
        "why_join_its.points[].image",
    ),
    "Blog": ("image", "cover_image"),
    "AboutUs": (
        "hero_section.points[].image",
        "who_we_are.image",
        "goals.mission_image",
        "goals.vision_image",
        "goals.values_image",
    ),
    "NavbarGroupTabImageManage": ("image",),
    "User": ("profile_picture",),
    "HireMainPageData": (
        "development_team_section.image",
        "dedicated_developer_section.services[].service_item_box[].image",
        "why_hire_developer_for_your_project.detail_box[].image",
        "why_choose_its_for_dedicated_resources.detail_box[].image",
    ),
    "PortfolioContent": (
        "hero_section.image",
        "hero_section.points[].image",
    ),
    "TrainingMainPageData": (
        "hero_section.image",
        "about_us_section.image",
        "its_institute_facilities_section.points[].image",
        "right_course_pick_section.card_box[].image",
        "right_course_pick_section.detail_box[].image",
    ),
    "HomePageData": (
        "hero_section.image",
        "hero_section.technology_section[].image",
        "reasons_to_choose.detail_box[].image",
        "about_our_company.detail_box[].image",
        "about_our_company.image",
        "about_our_company.button_content.image",
        "overseas_web_agencies.image",
    ),
}


class ImagePathRegistry:
    """
    Read-only lookup of image path descriptors by record type.

    Descriptors are validated on construction, so a malformed entry fails at
    startup instead of during a request.
    """

    def __init__(self, paths: Mapping[str, Iterable[str]]) -> None:
        frozen = {}
        for record_type, descriptors in paths.items():
            descriptors = tuple(descriptors)
            for descriptor in descriptors:
                parse_path(descriptor)
            frozen[record_type] = descriptors
        self._paths = MappingProxyType(frozen)

    def paths_for(self, record_type: str) -> Tuple[str, ...]:
        """Unknown record types have no paths, which turns cleanup into a no-op."""
        return self._paths.get(record_type, ())

    def record_types(self) -> Tuple[str, ...]:
        return tuple(self._paths)

    def __contains__(self, record_type: str) -> bool:
        return record_type in self._paths


DEFAULT_REGISTRY = ImagePathRegistry(IMAGE_PATHS)
