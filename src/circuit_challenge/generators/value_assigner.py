"""
Connector value assignment.

Randomised greedy: connectors are visited in random order and each takes a
random value not already used at either of its cells. There is no
backtracking; a dead end fails the assignment and the caller retries the
whole pipeline.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import logging

import numpy as np

from ..core.puzzle import Connector, ConnectorIncidence
from ..core.utils import ensure_rng, random_choice

logger = logging.getLogger(__name__)


@dataclass
class ValueAssignmentResult:
    """Result of connector value assignment"""
    success: bool
    connectors: List[Connector] = field(default_factory=list)
    error: Optional[str] = None


def _grid_shape(connectors: Sequence[Connector]):
    rows = max(max(c.cell_a.row, c.cell_b.row) for c in connectors) + 1
    cols = max(max(c.cell_a.col, c.cell_b.col) for c in connectors) + 1
    return rows, cols


def assign_connector_values(connectors: Sequence[Connector], min_value: int, max_value: int,
                            rng: Optional[np.random.Generator] = None,
                            incidence: Optional[ConnectorIncidence] = None) -> ValueAssignmentResult:
    """
    Give every connector a value so no cell touches two equal values.

    Args:
        connectors: Unvalued connectors
        min_value: Smallest allowed value (inclusive)
        max_value: Largest allowed value (inclusive)
        rng: Random source
        incidence: Cell to connector lookup for ``connectors``; built if omitted

    Returns:
        ValueAssignmentResult with valued connectors in the input order
    """
    rng = ensure_rng(rng)
    if not connectors:
        return ValueAssignmentResult(success=True)

    if incidence is None:
        rows, cols = _grid_shape(connectors)
        incidence = ConnectorIncidence(rows, cols, connectors)

    values: List[Optional[int]] = [None] * len(connectors)
    value_range = range(min_value, max_value + 1)

    for index in rng.permutation(len(connectors)):
        connector = connectors[index]

        used = set()
        for cell in (connector.cell_a, connector.cell_b):
            for neighbour in incidence.indices_at(cell):
                if values[neighbour] is not None:
                    used.add(values[neighbour])

        available = [v for v in value_range if v not in used]
        if not available:
            error = (f"No available values for connector between {connector.cell_a} and "
                     f"{connector.cell_b} (range {min_value}-{max_value})")
            logger.debug(error)
            return ValueAssignmentResult(success=False, error=error)

        values[index] = random_choice(available, rng)

    return ValueAssignmentResult(
        success=True,
        connectors=[c.with_value(v) for c, v in zip(connectors, values)],
    )
