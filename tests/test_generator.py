import pytest

import pathmap.world.generator as generator
from pathmap.config import MapConfig
from pathmap.render import BoardRecorder
from pathmap.utils.game_rng import GameRNG
from pathmap.world.generator import (
    GenerationError,
    build_attempt,
    generate_path_map,
    pick_starting_columns,
)
from pathmap.world.validation import GenerationRejected


def _assert_board_invariants(path_map, config):
    assert path_map.edge_count > config.map_length
    assert len(path_map.nodes) <= config.map_length * config.max_width
    assert len({node.cell for node in path_map.nodes}) == len(path_map.nodes)
    for source, destination in path_map.iter_edges():
        assert destination.floor == source.floor + 1
        assert abs(destination.column - source.column) <= 1
    for node in path_map.nodes:
        if node.floor < config.map_length - 1:
            assert len(node.next_nodes) >= 1
        else:
            assert node.next_nodes == []


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 1234])
def test_default_config_boards_hold_invariants(seed):
    config = MapConfig()
    result = generate_path_map(config, seed=seed)
    _assert_board_invariants(result.path_map, config)
    assert result.attempts >= 1
    assert sorted(n.column for n in result.path_map.starting_nodes()) == sorted(
        result.path_map.starting_columns
    )


def test_crisscrossing_boards_hold_invariants():
    config = MapConfig(allow_crisscrossing=True, chance_path_side=0.6, map_length=12, max_width=6)
    result = generate_path_map(config, seed=99)
    _assert_board_invariants(result.path_map, config)


def test_same_seed_same_board():
    config = MapConfig()
    first = generate_path_map(config, seed=2024)
    second = generate_path_map(config, seed=2024)
    assert first.seed == second.seed
    assert first.path_map.seed == first.seed
    assert first.path_map.to_dict() == second.path_map.to_dict()


def test_config_seed_used_when_none_given():
    config = MapConfig(seed=31)
    assert generate_path_map(config).seed == generate_path_map(config, seed=31).seed


def test_no_side_paths_gives_vertical_lines():
    config = MapConfig(
        number_of_starting_points=2,
        map_length=5,
        max_width=4,
        chance_path_side=0.0,
        chance_path_middle=1.0,
    )
    path_map = generate_path_map(config, seed=3).path_map
    assert path_map.edge_count == 2 * (config.map_length - 1)
    for node in path_map.nodes:
        assert node.column in path_map.starting_columns
        if node.floor < config.map_length - 1:
            (successor,) = path_map.successors(node)
            assert successor.column == node.column
            assert successor.floor == node.floor + 1


def test_all_columns_seeded_when_starting_points_fill_width():
    columns = pick_starting_columns(5, 5, GameRNG(seed=10))
    assert sorted(columns) == [0, 1, 2, 3, 4]

    config = MapConfig(number_of_starting_points=5, max_width=5)
    path_map = generate_path_map(config, seed=10).path_map
    assert sorted(path_map.starting_columns) == [0, 1, 2, 3, 4]
    assert all(path_map.node_at(0, c) is not None for c in range(5))


def test_too_many_starting_points_fails_before_generation():
    with pytest.raises(ValueError):
        pick_starting_columns(6, 5, GameRNG(seed=1))
    recorder = BoardRecorder()
    with pytest.raises(ValueError):
        generate_path_map(MapConfig(number_of_starting_points=6, max_width=5), renderer=recorder)
    assert recorder.clear_count == 0


def test_sparse_board_rejected():
    config = MapConfig(
        number_of_starting_points=1,
        map_length=4,
        max_width=3,
        chance_path_side=0.0,
        chance_path_middle=1.0,
    )
    # One straight line has map_length - 1 edges, never enough.
    with pytest.raises(GenerationRejected) as excinfo:
        build_attempt(config, GameRNG(seed=1))
    assert excinfo.value.edge_count == 3


def test_rejected_attempts_regenerate_from_scratch(monkeypatch):
    real_build = generator.build_attempt
    calls = []

    def flaky_build(config, rng, renderer=None):
        calls.append(rng.initial_seed)
        if len(calls) < 3:
            raise GenerationRejected("too sparse", edge_count=1)
        return real_build(config, rng, renderer=renderer)

    monkeypatch.setattr(generator, "build_attempt", flaky_build)
    recorder = BoardRecorder()
    result = generate_path_map(MapConfig(), seed=5, renderer=recorder)

    assert result.attempts == 3
    assert recorder.clear_count == 3
    assert len(set(calls)) == 3
    assert result.seed == calls[-1]
    assert len(recorder.nodes) == len(result.path_map.nodes)


def test_attempt_budget_exhausted(monkeypatch):
    def always_reject(config, rng, renderer=None):
        raise GenerationRejected("too sparse")

    monkeypatch.setattr(generator, "build_attempt", always_reject)
    with pytest.raises(GenerationError):
        generate_path_map(MapConfig(), seed=1, max_attempts=3)

    with pytest.raises(GenerationError):
        generate_path_map(MapConfig(max_attempts=2), seed=1)


def test_negative_attempt_budget_rejected():
    with pytest.raises(ValueError):
        generate_path_map(MapConfig(), seed=1, max_attempts=-1)


def test_deep_board_generates():
    # Far deeper than the interpreter recursion limit.
    config = MapConfig(map_length=1500, max_width=3, number_of_starting_points=3)
    result = generate_path_map(config, seed=1)
    _assert_board_invariants(result.path_map, config)
    assert any(node.floor == config.map_length - 1 for node in result.path_map.nodes)


def test_path_map_dump_lists_segments():
    path_map = generate_path_map(MapConfig(), seed=8).path_map
    data = path_map.to_dict()
    assert len(data["nodes"]) == len(path_map.nodes)
    assert len(data["edges"]) == path_map.edge_count
    for entry in data["edges"]:
        poses = path_map.segments[(entry["source"], entry["destination"])]
        assert len(entry["segments"]) == len(poses)
