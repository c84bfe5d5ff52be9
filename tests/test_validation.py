import pytest

from pathmap.world.validation import GenerationRejected, check_connectivity, is_connected_enough


def test_more_connections_than_floors_accepted():
    assert is_connected_enough(11, 10)
    check_connectivity(11, 10)


def test_connections_equal_to_floors_rejected():
    assert not is_connected_enough(10, 10)
    with pytest.raises(GenerationRejected) as excinfo:
        check_connectivity(10, 10)
    assert excinfo.value.edge_count == 10
    assert isinstance(excinfo.value, RuntimeError)
