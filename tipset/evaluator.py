"""Expected value of a whole system: the sum over every row it implies."""

import logging
import math
from typing import Sequence

from tipset.estimator import INTEGRATION_LIMIT, INTEGRATION_STEPS, estimate_row_value
from tipset.models import (
    DegenerateProbabilityModel,
    Event,
    InvalidConfiguration,
    MalformedEvent,
    combinations,
)

logger = logging.getLogger(__name__)

# How a row with zero share variance is handled
DEGENERATE_POLICIES = ("raise", "zero")


def evaluate_system(
    system: Sequence[Sequence[str]],
    events: Sequence[Event],
    pool_size: float,
    *,
    degenerate: str = "raise",
    steps: int = INTEGRATION_STEPS,
    limit: float = INTEGRATION_LIMIT,
    integrate: bool = True,
) -> float:
    """Sum the estimated value of every row in the system's cross product.

    With degenerate="zero" a row whose share variance is zero contributes
    nothing; with "raise" the DegenerateProbabilityModel propagates.
    """
    if degenerate not in DEGENERATE_POLICIES:
        raise InvalidConfiguration(
            f"Unknown degenerate policy {degenerate!r}; expected one of {DEGENERATE_POLICIES}"
        )
    if len(system) != len(events):
        raise MalformedEvent(
            f"System covers {len(system)} events but {len(events)} were given"
        )

    values = []
    for row in combinations(system):
        try:
            values.append(estimate_row_value(
                row, events, pool_size,
                steps=steps, limit=limit, integrate=integrate,
            ))
        except DegenerateProbabilityModel:
            if degenerate == "raise":
                raise
            logger.debug(f"Degenerate row {row} counted as zero")
    return math.fsum(values)
