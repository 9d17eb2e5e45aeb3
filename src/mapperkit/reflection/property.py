"""Property path expressions such as ``orders[0].items[1].name``.

A PropertyPath describes one segment and keeps the unparsed remainder.
Walking a path is forward-only: ``next()`` parses the remainder into the
next segment.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from mapperkit.core.errors import UnsupportedOperationError


def _first_delimiter(expression: str) -> int:
    """Position of the first ``.`` outside of ``[...]``, or -1."""
    depth = 0
    for pos, char in enumerate(expression):
        if char == "[":
            depth += 1
        elif char == "]" and depth:
            depth -= 1
        elif char == "." and not depth:
            return pos
    return -1


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """One parsed segment of a property path expression.

    ``children`` is None iff this is the last segment, ``index`` is None iff
    the segment carries no ``[...]`` access.
    """

    name: str
    indexed_name: str
    index: str | None = None
    children: str | None = None

    @classmethod
    def parse(cls, expression: str) -> PropertyPath:
        delim = _first_delimiter(expression)
        if delim > -1:
            head, children = expression[:delim], expression[delim + 1 :]
        else:
            head, children = expression, None
        name, index = head, None
        bracket = head.find("[")
        if bracket > -1:
            index = head[bracket + 1 : -1] if head.endswith("]") else head[bracket + 1 :]
            name = head[:bracket]
        return cls(name=name, indexed_name=head, index=index, children=children)

    def has_next(self) -> bool:
        return self.children is not None

    def next(self) -> PropertyPath:
        if self.children is None:
            raise StopIteration
        return PropertyPath.parse(self.children)

    def remove(self) -> None:
        raise UnsupportedOperationError.because(
            "Remove is not supported, as it has no meaning in the context of properties."
        )

    def segments(self) -> Iterator[PropertyPath]:
        """Yield this segment and every following one, in order."""
        segment: PropertyPath | None = self
        while segment is not None:
            yield segment
            segment = segment.next() if segment.has_next() else None

    def __iter__(self) -> Iterator[PropertyPath]:
        return self.segments()

    def __str__(self) -> str:
        if self.children is None:
            return self.indexed_name
        return f"{self.indexed_name}.{self.children}"
