# src/async_dynamo_query/base/placeholders.py
import logging
import re
from typing import Any, Dict, List, Tuple, Union

from .exceptions import MalformedExpressionError

log = logging.getLogger(__name__)

NAME_PREFIX = "#n"
VALUE_PREFIX = ":v"

PathSegment = Union[str, int]

_PART_RE = re.compile(r"^(?P<name>[^.\[\]]+)(?P<indexes>(?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")


def parse_path(path: str) -> Tuple[PathSegment, ...]:
    """
    Splits a document path into attribute names and list indexes.

    `"a.b[0].c"` -> `("a", "b", 0, "c")`. Names are strings, list indexes are
    ints. Raises MalformedExpressionError for an empty or badly bracketed path.
    """
    if not isinstance(path, str):
        raise MalformedExpressionError(
            f"Attribute path must be a string, got {type(path).__name__}"
        )
    if not path:
        raise MalformedExpressionError("Attribute path must not be empty")

    segments: List[PathSegment] = []
    for part in path.split("."):
        match = _PART_RE.match(part)
        if match is None:
            raise MalformedExpressionError(f"Invalid attribute path '{path}'")
        segments.append(match.group("name"))
        segments.extend(int(i) for i in _INDEX_RE.findall(match.group("indexes")))
    return tuple(segments)


def paths_overlap(first: str, second: str) -> bool:
    """True if the paths are equal or one is a document-path prefix of the other."""
    a, b = parse_path(first), parse_path(second)
    shortest = min(len(a), len(b))
    return a[:shortest] == b[:shortest]


class PlaceholderTable:
    """
    Alias allocator for one compilation.

    Name aliases are reused for a repeated attribute name so a path used in
    both the condition and the update shares its alias. Value aliases are
    never reused: every literal occurrence gets its own alias.
    """

    def __init__(self) -> None:
        self._names: Dict[str, str] = {}
        self._aliases_by_name: Dict[str, str] = {}
        self._values: Dict[str, Any] = {}

    @property
    def names(self) -> Dict[str, str]:
        return dict(self._names)

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    def name(self, segment: str) -> str:
        alias = self._aliases_by_name.get(segment)
        if alias is None:
            alias = f"{NAME_PREFIX}{len(self._names)}"
            self._names[alias] = segment
            self._aliases_by_name[segment] = alias
            log.debug(f"Allocated name alias {alias} for '{segment}'")
        return alias

    def value(self, value: Any) -> str:
        alias = f"{VALUE_PREFIX}{len(self._values)}"
        self._values[alias] = value
        return alias

    def path(self, path: str) -> str:
        """Renders a path with every attribute name replaced by its alias."""
        rendered = ""
        for segment in parse_path(path):
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            elif rendered:
                rendered += f".{self.name(segment)}"
            else:
                rendered = self.name(segment)
        return rendered
