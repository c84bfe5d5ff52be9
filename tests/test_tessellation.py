import numpy as np
import pytest

from pathmap.world.tessellation import segment_count, segment_padding, tessellate_edge


def _line(length):
    return np.zeros(3), np.array([float(length), 0.0, 0.0])


def test_exact_fit_has_no_padding():
    assert segment_count(10.0, 2.0, 1.0) == 5
    assert segment_padding(10.0, 2.0, 5) == pytest.approx(0.0)
    start, end = _line(10)
    poses = tessellate_edge(start, end, 2.0, 0.0, 1.0)
    assert [p.position[0] for p in poses] == pytest.approx([1.0, 3.0, 5.0, 7.0, 9.0])


def test_leftover_distance_spread_evenly():
    assert segment_count(9.0, 2.0, 1.0) == 4
    assert segment_padding(9.0, 2.0, 4) == pytest.approx(0.2)
    start, end = _line(9)
    poses = tessellate_edge(start, end, 2.0, 0.0, 1.0)
    assert [p.position[0] for p in poses] == pytest.approx([1.2, 3.4, 5.6, 7.8])
    # Gap after the last segment matches the interior gaps.
    assert 9.0 - (poses[-1].position[0] + 1.0) == pytest.approx(0.2)


def test_short_edge_has_no_segments():
    assert segment_count(1.0, 2.0, 1.0) == 0
    start, end = _line(1)
    assert tessellate_edge(start, end, 2.0, 0.5, 1.0) == []


def test_coincident_nodes_have_no_segments():
    assert tessellate_edge(np.zeros(3), np.zeros(3), 1.0, 0.1, 1.0) == []


def test_spacing_multiplier_reduces_count():
    start, end = _line(10)
    assert len(tessellate_edge(start, end, 2.0, 0.0, 2.0)) == 2


def test_segments_face_destination_and_sit_on_line():
    start = np.array([0.0, 0.0, 0.0])
    end = np.array([3.0, 0.0, 4.0])
    poses = tessellate_edge(start, end, 1.0, 0.5, 1.0)
    assert len(poses) == 5
    for pose in poses:
        assert pose.forward.tolist() == pytest.approx([0.6, 0.0, 0.8])
        assert pose.position[1] == pytest.approx(-0.25)
    assert poses[0].position[0] == pytest.approx(0.3)
    assert poses[0].position[2] == pytest.approx(0.4)


def test_invalid_geometry_rejected():
    with pytest.raises(ValueError):
        segment_count(5.0, 0.0, 1.0)
