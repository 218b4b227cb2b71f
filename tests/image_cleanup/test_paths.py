import pytest

from image_cleanup.paths import PathSegment, diff, parse_path, resolve_all


class TestParsePath:
    """Parsing of the `.` / `[]` descriptor language."""

    def test_parse_path_splits_plain_and_array_segments(self) -> None:
        assert parse_path("hero_section.points[].image") == (
            PathSegment("hero_section", False),
            PathSegment("points", True),
            PathSegment("image", False),
        )

    def test_parse_path_accepts_terminal_array(self) -> None:
        assert parse_path("gallery[]") == (PathSegment("gallery", True),)

    @pytest.mark.parametrize("path", ["", "a..b", "[]", "a.[].b", "a[0].b", "a[]x"])
    def test_parse_path_rejects_malformed_descriptors(self, path: str) -> None:
        with pytest.raises(ValueError):
            parse_path(path)


class TestResolveAll:
    """Collecting every image reachable at a path."""

    def test_resolve_single_string(self) -> None:
        assert resolve_all({"image": "A"}, "image") == ["A"]

    def test_resolve_list_leaf_without_brackets(self) -> None:
        assert resolve_all({"images": ["A", "B"]}, "images") == ["A", "B"]

    def test_resolve_terminal_array_of_strings(self) -> None:
        assert resolve_all({"images": ["A", "B"]}, "images[]") == ["A", "B"]

    def test_resolve_array_of_objects(self) -> None:
        doc = {"hero_section": {"points": [{"image": "A"}, {"title": "x"}, {"image": "B"}]}}
        assert resolve_all(doc, "hero_section.points[].image") == ["A", "B"]

    def test_resolve_nested_arrays_flatten(self) -> None:
        doc = {
            "dedicated_developer_section": {
                "services": [
                    {"service_item_box": [{"image": "A"}, {"image": "B"}]},
                    {"service_item_box": [{"image": "C"}]},
                ]
            }
        }
        path = "dedicated_developer_section.services[].service_item_box[].image"
        assert resolve_all(doc, path) == ["A", "B", "C"]

    def test_resolve_missing_or_wrong_shape_is_empty(self) -> None:
        assert resolve_all({}, "hero_section.image") == []
        assert resolve_all({"hero_section": "oops"}, "hero_section.image") == []
        assert resolve_all({"points": {"image": "A"}}, "points[].image") == []
        assert resolve_all(None, "image") == []

    def test_resolve_discards_non_strings_and_empty_values(self) -> None:
        doc = {"items": [{"image": 3}, {"image": None}, {"image": ""}, {"image": "A"}]}
        assert resolve_all(doc, "items[].image") == ["A"]

    def test_resolve_does_not_duplicate(self) -> None:
        doc = {"items": [{"image": "A"}, {"image": "A"}]}
        assert resolve_all(doc, "items[].image") == ["A"]


class TestDiff:
    """Differential detection of replaced/removed images."""

    def test_single_string_replaced(self) -> None:
        assert diff({"image": "A"}, {"image": "B"}, "image") == ["A"]

    def test_single_string_unchanged(self) -> None:
        assert diff({"image": "A"}, {"image": "A"}, "image") == []

    def test_single_string_removed_or_emptied(self) -> None:
        assert diff({"image": "A"}, {}, "image") == ["A"]
        assert diff({"image": "A"}, {"image": ""}, "image") == ["A"]
        assert diff({"image": "A"}, None, "image") == ["A"]

    def test_array_positional_diff(self) -> None:
        old = {"images": ["A", "B", "C"]}
        new = {"images": ["A", "X"]}
        assert diff(old, new, "images") == ["B", "C"]
        assert diff(old, new, "images[]") == ["B", "C"]

    def test_nested_array_of_objects_diff(self) -> None:
        old = {"points": [{"image": "A"}, {"image": "B"}]}
        new = {"points": [{"image": "A"}, {"image": "C"}]}
        assert diff(old, new, "points[].image") == ["B"]

    def test_elements_removed_from_new_array(self) -> None:
        old = {"section": {"points": [{"image": "A"}, {"image": "B"}, {"image": "C"}]}}
        new = {"section": {"points": [{"image": "A"}]}}
        assert diff(old, new, "section.points[].image") == ["B", "C"]

    def test_new_array_missing_marks_everything(self) -> None:
        old = {"points": [{"image": "A"}, {"image": "B"}]}
        assert diff(old, {}, "points[].image") == ["A", "B"]

    def test_reorder_counts_as_replacement(self) -> None:
        assert diff({"images": ["A", "B"]}, {"images": ["B", "A"]}, "images") == ["A", "B"]

    def test_old_side_absent_marks_nothing(self) -> None:
        assert diff({}, {"image": "B"}, "image") == []
        assert diff({"points": "oops"}, {"points": []}, "points[].image") == []
        assert diff(None, {"image": "B"}, "image") == []

    def test_nested_arrays_diff(self) -> None:
        path = "services[].items[].image"
        old = {"services": [{"items": [{"image": "A"}, {"image": "B"}]}, {"items": [{"image": "C"}]}]}
        new = {"services": [{"items": [{"image": "A"}]}, {"items": [{"image": "D"}]}]}
        assert diff(old, new, path) == ["B", "C"]
