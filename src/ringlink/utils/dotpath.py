"""Dot-delimited path access over a JSON-shaped tree (``clipboard.maxHistory``)."""

from typing import Any, Callable, Dict, List, Optional


class _Missing:
    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: dict) -> "_Missing":
        return self

    def __repr__(self) -> str:
        return "MISSING"


# Returned when a path does not resolve; distinct from a stored ``None``.
MISSING = _Missing()


def split_path(path: str) -> List[str]:
    return [segment for segment in path.split(".") if segment]


def _list_index(items: list, segment: str) -> Optional[int]:
    if not segment.isdigit():
        return None
    index = int(segment)
    return index if index < len(items) else None


def _can_address(node: Any, segment: str) -> bool:
    if isinstance(node, dict):
        return True
    if isinstance(node, list):
        return segment.isdigit()
    return False


def resolve(document: Any, path: str) -> Any:
    node = document
    for segment in split_path(path):
        if isinstance(node, dict):
            if segment not in node:
                return MISSING
            node = node[segment]
        elif isinstance(node, list):
            index = _list_index(node, segment)
            if index is None:
                return MISSING
            node = node[index]
        else:
            return MISSING
    return node


def _put(node: Any, segment: str, value: Any) -> None:
    if isinstance(node, list):
        node[int(segment)] = value
    else:
        node[segment] = value


def _extend_to(items: list, segment: str, filler: Callable[[], Any]) -> None:
    while len(items) <= int(segment):
        items.append(filler())


def assign(document: Dict[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating dicts along the way.

    Anything in the way that cannot hold the next segment (a scalar, ``None``
    or a list addressed by a non-index) is replaced by an empty dict. A list
    addressed past its end is extended: with empty dicts when the path goes
    deeper, with ``None`` when the index is the final segment.
    """
    segments = split_path(path)
    if not segments:
        raise ValueError("config path must not be empty")

    node: Any = document
    for position, segment in enumerate(segments[:-1]):
        following = segments[position + 1]
        if isinstance(node, list):
            _extend_to(node, segment, dict)
        child = resolve(node, segment)
        if not _can_address(child, following):
            child = {}
            _put(node, segment, child)
        node = child

    if isinstance(node, list):
        _extend_to(node, segments[-1], lambda: None)
    _put(node, segments[-1], value)
