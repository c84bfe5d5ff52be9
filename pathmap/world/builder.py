# pathmap/world/builder.py
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import structlog

from pathmap.config import MapConfig
from pathmap.render import BoardRenderer
from pathmap.utils.game_rng import GameRNG
from pathmap.world.grid import MapNode, NodeGrid
from pathmap.world.placement import place_node
from pathmap.world.tessellation import SegmentPose, tessellate_edge
from pathmap.world.validation import GenerationRejected

log = structlog.get_logger()

Edge = Tuple[int, int]

# Trial steps of one pass over a node's forward options.
PASS_START, TRY_LEFT, TRY_RIGHT, TRY_MIDDLE = range(4)


@dataclass
class _Frame:
    """A node whose forward edges are still being decided."""
    node: MapNode
    step: int = PASS_START
    created: int = 0
    rolls: int = 0
    pending: Optional[MapNode] = None # new target whose subtree is being built


class GraphBuilder:
    """Lazily builds the node graph of one generation attempt.

    Nodes are created on first request and memoized in the grid.  Each new
    node keeps rolling left/right/middle trials until at least one forward
    edge exists, and every edge it creates pulls in the complete subtree
    below its target before the next trial runs.  The depth-first walk uses
    an explicit stack, so board depth is not limited by the interpreter's
    recursion limit.
    """

    def __init__(
        self,
        config: MapConfig,
        rng: GameRNG,
        grid: Optional[NodeGrid] = None,
        renderer: Optional[BoardRenderer] = None,
    ):
        self.config = config
        self.rng = rng
        self.grid = grid if grid is not None else NodeGrid(config.map_length, config.max_width)
        self.renderer = renderer
        self.edges: List[Edge] = []
        self.segments: Dict[Edge, List[SegmentPose]] = {}

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def node_count(self) -> int:
        return len(self.grid)

    def instantiate(self, floor: int, column: int) -> MapNode:
        """Return the node at ``(floor, column)``, building it and everything below it if needed."""
        existing = self.grid.get(floor, column)
        if existing is not None:
            return existing

        root = self._create_node(floor, column)
        stack: List[_Frame] = [_Frame(root)]
        while stack:
            frame = stack[-1]
            target = self._next_target(frame)
            if target is None:
                stack.pop()
                if stack and stack[-1].pending is frame.node:
                    parent = stack[-1]
                    self._add_edge(parent.node, frame.node)
                    parent.created += 1
                    parent.pending = None
                continue

            reached = self.grid.get(*target)
            if reached is not None:
                self._add_edge(frame.node, reached)
                frame.created += 1
                continue
            frame.pending = self._create_node(*target)
            stack.append(_Frame(frame.pending))
        return root

    def _create_node(self, floor: int, column: int) -> MapNode:
        cfg = self.config
        position = place_node(
            floor, column, cfg.max_width, cfg.x_max_size, cfg.y_padding, self.rng
        )
        kind = self.rng.choice(cfg.node_kinds)
        node = MapNode(
            index=len(self.grid), floor=floor, column=column, position=position, kind=kind
        )
        # Record before expanding so deeper and sibling work sees this node.
        self.grid.set(floor, column, node)
        if self.renderer is not None:
            self.renderer.place_node(node)
        log.debug("Created node", floor=floor, column=column, kind=kind, index=node.index)
        return node

    def _next_target(self, frame: _Frame) -> Optional[Tuple[int, int]]:
        """Roll trials for ``frame`` until one picks a cell or the node is done."""
        cfg = self.config
        floor, column = frame.node.floor, frame.node.column
        next_floor = floor + 1
        while True:
            if frame.step == PASS_START:
                if floor >= cfg.map_length - 1 or frame.created > 0:
                    return None
                if cfg.max_edge_rolls and frame.rolls >= cfg.max_edge_rolls:
                    log.debug(
                        "Node exhausted edge rolls", floor=floor, column=column, rolls=frame.rolls
                    )
                    raise GenerationRejected(
                        f"node ({floor}, {column}) found no path after {frame.rolls} rolls",
                        edge_count=self.edge_count,
                    )
                frame.rolls += 1
                frame.step = TRY_LEFT

            if frame.step == TRY_LEFT:
                frame.step = TRY_RIGHT
                if column > 0 and self.rng.get_float() < cfg.chance_path_side:
                    if self._may_cross(next_floor, column):
                        return next_floor, column - 1

            if frame.step == TRY_RIGHT:
                frame.step = TRY_MIDDLE
                if column < cfg.max_width - 1 and self.rng.get_float() < cfg.chance_path_side:
                    if self._may_cross(next_floor, column):
                        return next_floor, column + 1

            if frame.step == TRY_MIDDLE:
                frame.step = PASS_START
                if self.rng.get_float() < cfg.chance_path_middle:
                    return next_floor, column

    def _may_cross(self, next_floor: int, column: int) -> bool:
        # Diagonals are suppressed once the straight-ahead cell is claimed.
        return self.config.allow_crisscrossing or self.grid.is_empty(next_floor, column)

    def _add_edge(self, source: MapNode, destination: MapNode) -> None:
        edge = (source.index, destination.index)
        source.next_nodes.append(destination.index)
        self.edges.append(edge)

        cfg = self.config
        poses = tessellate_edge(
            source.position,
            destination.position,
            cfg.segment_length,
            cfg.segment_height,
            cfg.multiplicative_space_between_lines,
        )
        self.segments[edge] = poses
        if self.renderer is not None:
            for pose in poses:
                self.renderer.place_segment(source, destination, pose)
        log.debug(
            "Connected nodes",
            source=source.cell,
            destination=destination.cell,
            segments=len(poses),
        )
