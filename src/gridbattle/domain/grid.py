"""Grid positions and the exclusive cell occupancy store."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Tuple


@dataclass(frozen=True, slots=True)
class GridPosition:
    """Integer cell coordinates."""

    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> "GridPosition":
        return GridPosition(self.row + d_row, self.col + d_col)

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}


def chebyshev_distance(a: GridPosition, b: GridPosition) -> int:
    """Distance where a diagonal step costs the same as an orthogonal one."""
    return max(abs(a.row - b.row), abs(a.col - b.col))


class OccupancyGrid:
    """
    Single source of truth for which unit holds which cell.

    Every mutator reports rejection through its return value; callers are
    expected to try another candidate rather than treat a refusal as an error.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells: Dict[GridPosition, str] = {}

    def in_bounds(self, pos: GridPosition) -> bool:
        return 0 <= pos.row < self.height and 0 <= pos.col < self.width

    def clamp(self, pos: GridPosition) -> GridPosition:
        return GridPosition(
            row=max(0, min(self.height - 1, pos.row)),
            col=max(0, min(self.width - 1, pos.col)),
        )

    def occupant(self, pos: GridPosition) -> str | None:
        return self._cells.get(pos)

    def is_free(self, pos: GridPosition) -> bool:
        return self.in_bounds(pos) and pos not in self._cells

    def occupy(self, pos: GridPosition, unit_id: str) -> bool:
        if not self.is_free(pos):
            return False
        self._cells[pos] = unit_id
        return True

    def vacate(self, pos: GridPosition) -> None:
        self._cells.pop(pos, None)

    def move(self, unit_id: str, from_pos: GridPosition, to_pos: GridPosition) -> bool:
        """Relocate ``unit_id``; nothing changes unless every precondition holds."""
        if not self.is_free(to_pos):
            return False
        if self._cells.get(from_pos) != unit_id:
            return False
        del self._cells[from_pos]
        self._cells[to_pos] = unit_id
        return True

    def find_nearest_free(self, pos: GridPosition, max_radius: int) -> GridPosition | None:
        """Search the centre, then square rings of growing radius, for a free cell."""
        if self.is_free(pos):
            return pos
        for radius in range(1, max_radius + 1):
            for d_row in range(-radius, radius + 1):
                for d_col in range(-radius, radius + 1):
                    # perimeter of the ring only
                    if abs(d_row) != radius and abs(d_col) != radius:
                        continue
                    candidate = pos.offset(d_row, d_col)
                    if self.is_free(candidate):
                        return candidate
        return None

    def force(self, pos: GridPosition, unit_id: str) -> None:
        """Make ``pos`` belong to ``unit_id``, dropping any other claim it held."""
        for cell in [cell for cell, owner in self._cells.items() if owner == unit_id]:
            del self._cells[cell]
        self._cells[pos] = unit_id

    def cell_of(self, unit_id: str) -> GridPosition | None:
        for cell, owner in self._cells.items():
            if owner == unit_id:
                return cell
        return None

    def items(self) -> Iterator[Tuple[GridPosition, str]]:
        return iter(list(self._cells.items()))

    def __len__(self) -> int:
        return len(self._cells)
