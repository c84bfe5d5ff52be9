"""Edge tessellation.

Turns a logical edge between two placed nodes into the row of fixed-length
path segments a renderer lays down between them.  Segments and gaps
alternate evenly: the gap before the first segment, between segments and
after the last one are all the same length.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import numpy as np

UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)


@dataclass(frozen=True)
class SegmentPose:
    """Placement of one path segment: center position and forward axis."""

    position: np.ndarray
    forward: np.ndarray

    def to_dict(self) -> dict:
        return {
            "position": [float(v) for v in self.position],
            "forward": [float(v) for v in self.forward],
        }


def segment_count(distance: float, segment_length: float, spacing: float) -> int:
    """Number of segments fitting in ``distance`` under the spacing multiplier."""
    if segment_length <= 0 or spacing <= 0:
        raise ValueError("segment_length and spacing must be positive")
    return int(math.floor(distance / (segment_length * spacing)))


def segment_padding(distance: float, segment_length: float, count: int) -> float:
    """Uniform gap around ``count`` segments laid along ``distance``."""
    return (distance - count * segment_length) / (count + 1)


def tessellate_edge(
    start: np.ndarray,
    end: np.ndarray,
    segment_length: float,
    segment_height: float,
    spacing: float,
) -> List[SegmentPose]:
    """Lay segments from ``start`` towards ``end``.

    Each segment faces ``end`` and is lowered by half its height so its base,
    not its center, sits on the line between the two nodes.  Nodes closer
    than one spaced segment produce no segments at all; the edge itself is
    still valid.
    """
    start = np.asarray(start, dtype=np.float64)
    end = np.asarray(end, dtype=np.float64)
    delta = end - start
    dist = float(np.linalg.norm(delta))
    count = segment_count(dist, segment_length, spacing)
    if count <= 0:
        return []

    direction = delta / dist
    pad = segment_padding(dist, segment_length, count)
    first = start + direction * (pad + segment_length / 2.0)
    drop = UP * (segment_height / 2.0)

    poses: List[SegmentPose] = []
    for i in range(count):
        center = first + direction * ((segment_length + pad) * i)
        poses.append(SegmentPose(position=center - drop, forward=direction.copy()))
    return poses
