import numpy as np

from circuit_challenge.core.puzzle import ConnectorIncidence
from circuit_challenge.core.validator import PuzzleValidator
from circuit_challenge.generators.connector_builder import build_diagonal_grid, build_connector_graph
from circuit_challenge.generators.value_assigner import assign_connector_values


def _connectors(rows, cols, rng):
    return build_connector_graph(rows, cols, build_diagonal_grid(rows, cols, {}, rng))


def test_values_unique_per_cell(rng):
    connectors = _connectors(4, 5, rng)
    result = assign_connector_values(connectors, 5, 25, rng)

    assert result.success, result.error
    assert len(result.connectors) == len(connectors)
    assert PuzzleValidator.validate_connector_uniqueness(result.connectors, 4, 5)


def test_values_in_range_and_order_kept(rng):
    connectors = _connectors(3, 4, rng)
    result = assign_connector_values(connectors, 5, 25, rng, ConnectorIncidence(3, 4, connectors))

    assert result.success
    assert all(5 <= c.value <= 25 for c in result.connectors)
    for before, after in zip(connectors, result.connectors):
        assert (before.kind, before.cell_a, before.cell_b) == (after.kind, after.cell_a, after.cell_b)


def test_input_connectors_untouched(rng):
    connectors = _connectors(3, 4, rng)
    assign_connector_values(connectors, 5, 25, rng)
    assert all(c.value is None for c in connectors)


def test_range_too_small_fails():
    # Every 2x2 grid has a corner with three connectors
    connectors = _connectors(2, 2, np.random.default_rng(0))
    result = assign_connector_values(connectors, 1, 2, np.random.default_rng(0))

    assert not result.success
    assert result.connectors == []
    assert "No available values" in result.error


def test_empty_connector_list():
    result = assign_connector_values([], 1, 10)
    assert result.success
    assert result.connectors == []
