"""Board rendering interface.

The generator never draws anything itself.  It hands each node and each
path segment to a :class:`BoardRenderer` as they are created and clears the
renderer before every attempt, so a rejected board leaves nothing behind.
"""

from __future__ import annotations

from typing import List, Protocol, Tuple

from pathmap.world.grid import MapNode
from pathmap.world.tessellation import SegmentPose


class BoardRenderer(Protocol):
    def clear(self) -> None:
        """Destroy everything placed for the previous attempt."""

    def place_node(self, node: MapNode) -> None:
        """Show a point of interest at ``node.position``."""

    def place_segment(self, source: MapNode, destination: MapNode, pose: SegmentPose) -> None:
        """Show one path segment of the edge ``source -> destination``."""


class BoardRecorder:
    """In-memory renderer that just keeps what it was given."""

    def __init__(self) -> None:
        self.nodes: List[MapNode] = []
        self.segments: List[Tuple[int, int, SegmentPose]] = []
        self.clear_count = 0

    def clear(self) -> None:
        self.nodes.clear()
        self.segments.clear()
        self.clear_count += 1

    def place_node(self, node: MapNode) -> None:
        self.nodes.append(node)

    def place_segment(self, source: MapNode, destination: MapNode, pose: SegmentPose) -> None:
        self.segments.append((source.index, destination.index, pose))
