from dataclasses import dataclass, replace
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class Selection:
    """Anchored rectangle: (start_row, start_col) is the anchor, end is the moving corner."""

    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @classmethod
    def cell(cls, row: int, col: int) -> "Selection":
        return cls(row, col, row, col)

    def normalized(self) -> "Selection":
        r0, r1 = sorted((self.start_row, self.end_row))
        c0, c1 = sorted((self.start_col, self.end_col))
        return Selection(r0, c0, r1, c1)

    def rect(self) -> Tuple[int, int, int, int]:
        n = self.normalized()
        return (n.start_row, n.end_row, n.start_col, n.end_col)

    @property
    def is_single_cell(self) -> bool:
        return self.start_row == self.end_row and self.start_col == self.end_col

    @property
    def height(self) -> int:
        return abs(self.end_row - self.start_row) + 1

    @property
    def width(self) -> int:
        return abs(self.end_col - self.start_col) + 1

    def contains(self, row: int, col: int) -> bool:
        r0, r1, c0, c1 = self.rect()
        return r0 <= row <= r1 and c0 <= col <= c1

    def extend_to(self, row: int, col: int) -> "Selection":
        return replace(self, end_row=row, end_col=col)

    def clamped(self, rows: int, cols: int) -> Optional["Selection"]:
        if rows <= 0 or cols <= 0:
            return None

        def clamp(v, hi):
            return max(0, min(v, hi - 1))

        return Selection(
            clamp(self.start_row, rows),
            clamp(self.start_col, cols),
            clamp(self.end_row, rows),
            clamp(self.end_col, cols),
        )

    def cells(self) -> Iterator[Tuple[int, int]]:
        r0, r1, c0, c1 = self.rect()
        for r in range(r0, r1 + 1):
            for c in range(c0, c1 + 1):
                yield r, c
