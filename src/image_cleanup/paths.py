"""
Path descriptors for image fields inside nested JSON records.

A descriptor is a dot-separated list of field names; a trailing `[]` on a
segment means the field holds a list and the rest of the path applies to
every element:

    "image"                       -> record["image"]
    "hero_section.points[].image" -> each record["hero_section"]["points"][i]["image"]
    "gallery[]"                   -> each string in record["gallery"]

Records are plain dict/list/str trees as returned by the database. Shapes that
do not match the descriptor are treated as absent, never as errors.
"""

from typing import Any, List, NamedTuple, Optional, Tuple


class PathSegment(NamedTuple):
    name: str
    many: bool


def parse_path(path: str) -> Tuple[PathSegment, ...]:
    """
    Splits a descriptor into segments.

    Raises:
        ValueError: If the descriptor is empty or has an empty/malformed segment.
    """
    if not path or not isinstance(path, str):
        raise ValueError(f"Invalid image path descriptor: {path!r}")
    segments = []
    for part in path.split("."):
        many = part.endswith("[]")
        name = part[:-2] if many else part
        if not name or "[" in name or "]" in name:
            raise ValueError(f"Invalid segment {part!r} in image path descriptor {path!r}")
        segments.append(PathSegment(name, many))
    return tuple(segments)


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _lookup(node: Any, segments) -> Any:
    """Follows plain field access; None when any step is missing."""
    for segment in segments:
        if not isinstance(node, dict) or segment.name not in node:
            return None
        node = node[segment.name]
    return node


def _unique(values) -> List[str]:
    seen = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


def resolve_all(document: Any, path: str) -> List[str]:
    """Returns every non-empty image reference reachable at `path`, in document order."""
    nodes = [document]
    for segment in parse_path(path):
        next_nodes = []
        for node in nodes:
            if not isinstance(node, dict) or segment.name not in node:
                continue
            value = node[segment.name]
            if segment.many:
                if _is_list(value):
                    next_nodes.extend(value)
            else:
                next_nodes.append(value)
        nodes = next_nodes

    references = []
    for node in nodes:
        if isinstance(node, str):
            references.append(node)
        elif _is_list(node):
            references.extend(item for item in node if isinstance(item, str))
    return _unique(ref for ref in references if ref)


def _compare_leaf(old_value: Any, new_value: Any) -> List[str]:
    if isinstance(old_value, str):
        return [old_value] if old_value and old_value != new_value else []
    if _is_list(old_value):
        new_items = new_value if _is_list(new_value) else ()
        changed = []
        for i, old_item in enumerate(old_value):
            if not isinstance(old_item, str) or not old_item:
                continue
            if i >= len(new_items) or new_items[i] != old_item:
                changed.append(old_item)
        return changed
    return []


def _diff_segments(old: Any, new: Any, segments: Tuple[PathSegment, ...]) -> List[str]:
    split = next((i for i, segment in enumerate(segments) if segment.many), None)
    if split is None:
        return _compare_leaf(_lookup(old, segments), _lookup(new, segments))

    prefix = segments[:split] + (PathSegment(segments[split].name, False),)
    rest = segments[split + 1:]
    old_items = _lookup(old, prefix)
    if not _is_list(old_items):
        return []
    new_items = _lookup(new, prefix)
    if not _is_list(new_items):
        new_items = ()

    changed = []
    for i, old_item in enumerate(old_items):
        new_item: Optional[Any] = new_items[i] if i < len(new_items) else None
        if rest:
            if isinstance(old_item, dict):
                changed.extend(_diff_segments(old_item, new_item, rest))
        else:
            changed.extend(_compare_leaf(old_item, new_item))
    return changed


def diff(old_document: Any, new_document: Any, path: str) -> List[str]:
    """
    Returns the image references at `path` in `old_document` that were replaced
    or removed in `new_document`.

    Lists are compared index by index, so reordering counts as replacement.
    """
    return _unique(_diff_segments(old_document, new_document, parse_path(path)))
