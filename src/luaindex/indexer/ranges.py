"""Zero-based line/column positions and closed source ranges."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A zero-based cursor position, ordered by line then column."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Range:
    """A closed interval ``[start, end]`` over positions.

    Attributes:
        start: First position covered.
        end: Last position covered (inclusive).
    """

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @classmethod
    def from_coords(cls, start_line: int, start_col: int, end_line: int, end_col: int) -> Range:
        return cls(Position(start_line, start_col), Position(end_line, end_col))

    def contains(self, position: Position) -> bool:
        return contains(self, position)


def contains(rng: Range, position: Position) -> bool:
    """Return True if ``position`` lies inside ``rng``.

    Both boundaries are inclusive. A position sitting exactly between two
    adjacent ranges matches both; callers resolve that by iteration order.
    """
    if position.line < rng.start.line or position.line > rng.end.line:
        return False
    if position.line == rng.start.line and position.column < rng.start.column:
        return False
    if position.line == rng.end.line and position.column > rng.end.column:
        return False
    return True
