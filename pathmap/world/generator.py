"""Path map generation entry points.

``build_attempt`` runs one full build from an explicit random source and
either returns the finished :class:`PathMap` or raises
:class:`GenerationRejected`.  ``generate_path_map`` drives attempts with fresh
seeds until one is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import structlog

from pathmap.config import MapConfig
from pathmap.render import BoardRenderer
from pathmap.utils.game_rng import GameRNG
from pathmap.world.builder import Edge, GraphBuilder
from pathmap.world.grid import MapNode, NodeGrid
from pathmap.world.tessellation import SegmentPose
from pathmap.world.validation import GenerationRejected, check_connectivity

log = structlog.get_logger()


class GenerationError(RuntimeError):
    """No acceptable board was produced within the attempt budget."""


@dataclass
class PathMap:
    """An accepted board: nodes, forward edges and their path segments."""

    map_length: int
    max_width: int
    nodes: List[MapNode]
    edges: List[Edge]
    segments: Dict[Edge, List[SegmentPose]]
    starting_columns: List[int]
    seed: Optional[int] = None
    _index: Dict[Tuple[int, int], int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._index = {node.cell: node.index for node in self.nodes}

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def node_at(self, floor: int, column: int) -> Optional[MapNode]:
        idx = self._index.get((floor, column))
        return None if idx is None else self.nodes[idx]

    def successors(self, node: MapNode) -> List[MapNode]:
        return [self.nodes[i] for i in node.next_nodes]

    def iter_edges(self) -> Iterator[Tuple[MapNode, MapNode]]:
        for src, dst in self.edges:
            yield self.nodes[src], self.nodes[dst]

    def starting_nodes(self) -> List[MapNode]:
        return [self.nodes[self._index[(0, column)]] for column in self.starting_columns]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "map_length": self.map_length,
            "max_width": self.max_width,
            "starting_columns": list(self.starting_columns),
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [
                {
                    "source": src,
                    "destination": dst,
                    "segments": [pose.to_dict() for pose in self.segments.get((src, dst), [])],
                }
                for src, dst in self.edges
            ],
        }


@dataclass
class GenerationResult:
    path_map: PathMap
    seed: int
    attempts: int


def pick_starting_columns(count: int, max_width: int, rng: GameRNG) -> List[int]:
    """Draw ``count`` distinct floor-0 columns, in draw order."""
    if count > max_width:
        log.error("Too many starting points", count=count, max_width=max_width)
        raise ValueError("Number of starting points greater than max_width!")

    columns: List[int] = []
    while len(columns) < count:
        column = rng.get_int(0, max_width - 1)
        if column not in columns:
            columns.append(column)
    return columns


def build_attempt(
    config: MapConfig,
    rng: GameRNG,
    renderer: Optional[BoardRenderer] = None,
) -> PathMap:
    """Build one complete board from ``rng``.

    Raises :class:`GenerationRejected` if the board is too sparse or a node
    ran out of edge rolls.  Nothing from a rejected attempt is reusable.
    """
    grid = NodeGrid(config.map_length, config.max_width)
    builder = GraphBuilder(config, rng, grid=grid, renderer=renderer)

    starting_columns = pick_starting_columns(
        config.number_of_starting_points, config.max_width, rng
    )
    for column in starting_columns:
        builder.instantiate(0, column)

    check_connectivity(builder.edge_count, config.map_length)
    return PathMap(
        map_length=config.map_length,
        max_width=config.max_width,
        nodes=list(grid.nodes),
        edges=list(builder.edges),
        segments=dict(builder.segments),
        starting_columns=starting_columns,
        seed=rng.initial_seed,
    )


def generate_path_map(
    config: MapConfig,
    seed: Optional[int] = None,
    renderer: Optional[BoardRenderer] = None,
    max_attempts: Optional[int] = None,
) -> GenerationResult:
    """Generate boards until one passes the connectivity check.

    ``seed`` seeds the stream that hands out one fresh seed per attempt, so
    the same seed and config always yield the same board.  ``max_attempts``
    falls back to ``config.max_attempts``; zero or ``None`` retries forever.
    """
    config.validate()
    if seed is None:
        seed = config.seed
    if max_attempts is None:
        max_attempts = config.max_attempts
    elif max_attempts < 0:
        log.error("Invalid attempt budget", max_attempts=max_attempts)
        raise ValueError(f"max_attempts must be >= 0, got {max_attempts}")

    seeder = GameRNG(seed=seed)
    rng = GameRNG(seed=0)
    log.info(
        "Starting path map generation",
        seed=seeder.initial_seed,
        map_length=config.map_length,
        max_width=config.max_width,
        starting_points=config.number_of_starting_points,
    )

    attempt = 0
    while not max_attempts or attempt < max_attempts:
        attempt += 1
        attempt_seed = seeder.get_seed()
        rng.reset(seed=attempt_seed)
        if renderer is not None:
            renderer.clear()
        try:
            path_map = build_attempt(config, rng, renderer=renderer)
        except GenerationRejected as e:
            log.info(
                "Recreating board",
                attempt=attempt,
                seed=attempt_seed,
                connections=e.edge_count,
                reason=e.reason,
            )
            continue

        log.info(
            "Created board",
            attempt=attempt,
            seed=attempt_seed,
            connections=path_map.edge_count,
            points=len(path_map.nodes),
        )
        return GenerationResult(path_map=path_map, seed=attempt_seed, attempts=attempt)

    log.error("Path map generation gave up", attempts=attempt, seed=seeder.initial_seed)
    raise GenerationError(f"Failed to generate a path map after {attempt} attempts")
