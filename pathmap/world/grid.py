# pathmap/world/grid.py
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import numpy as np
import structlog

log = structlog.get_logger()

EMPTY_CELL = -1


@dataclass(eq=False)
class MapNode:
    """A point of interest occupying one cell of the board."""
    index: int
    floor: int
    column: int
    position: np.ndarray # (x, 0, z); the board lies on the XZ plane
    kind: str
    next_nodes: List[int] = field(default_factory=list) # arena indices, creation order

    @property
    def cell(self) -> tuple[int, int]:
        return self.floor, self.column

    def to_dict(self) -> Dict[str, object]:
        return {
            "index": self.index,
            "floor": self.floor,
            "column": self.column,
            "position": [float(v) for v in self.position],
            "kind": self.kind,
            "next_nodes": list(self.next_nodes),
        }


class NodeGrid:
    """Arena of nodes plus a ``(floor, column) -> index`` lookup table.

    The table doubles as the memo for lazy node construction and as the
    occupancy check used by the crisscross guard.  A cell is written once.
    """

    def __init__(self, floors: int, width: int):
        if floors <= 0 or width <= 0:
            log.error("Invalid grid dimensions", floors=floors, width=width)
            raise ValueError("Grid floors and width must be positive integers.")
        self.floors = floors
        self.width = width
        self.nodes: List[MapNode] = []
        self.index: np.ndarray = np.full(
            (floors, width), fill_value=EMPTY_CELL, dtype=np.int32, order="C"
        )

    def in_bounds(self, floor: int, column: int) -> bool:
        return 0 <= floor < self.floors and 0 <= column < self.width

    def _check_bounds(self, floor: int, column: int) -> None:
        if not self.in_bounds(floor, column):
            raise IndexError(
                f"Cell ({floor}, {column}) outside {self.floors}x{self.width} grid"
            )

    def get(self, floor: int, column: int) -> Optional[MapNode]:
        self._check_bounds(floor, column)
        idx = int(self.index[floor, column])
        if idx == EMPTY_CELL:
            return None
        return self.nodes[idx]

    def is_empty(self, floor: int, column: int) -> bool:
        return self.get(floor, column) is None

    def set(self, floor: int, column: int, node: MapNode) -> None:
        self._check_bounds(floor, column)
        if self.index[floor, column] != EMPTY_CELL:
            log.error("Attempted to overwrite occupied cell", floor=floor, column=column)
            raise ValueError(f"Cell ({floor}, {column}) already holds a node")
        if node.index != len(self.nodes):
            raise ValueError(
                f"Node index {node.index} does not match next arena slot {len(self.nodes)}"
            )
        self.nodes.append(node)
        self.index[floor, column] = node.index

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[MapNode]:
        return iter(self.nodes)
