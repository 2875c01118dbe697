"""Neighbour moves that keep the half/full hedge counts fixed.

Two moves, picked with equal probability:
  - resample: give one event a different outcome set of the same hedge type
  - type swap: exchange the hedge types of two events and redraw both sets,
    rejected (input state returned) if the half/full counts no longer match
"""

import logging
from typing import Sequence

from tipset.models import HedgeType, OutcomeSet, SearchState

logger = logging.getLogger(__name__)


def hedge_counts_match(state: SearchState, half_target: int, full_target: int) -> bool:
    return (
        state.count(HedgeType.HALF) == half_target
        and state.count(HedgeType.FULL) == full_target
    )


def _pick_for_type(
    hedge_type: HedgeType,
    single_options: Sequence[OutcomeSet],
    half_options: Sequence[OutcomeSet],
    full_option: OutcomeSet,
    rng,
) -> OutcomeSet:
    if hedge_type == HedgeType.SINGLE:
        return tuple(rng.choice(single_options))
    if hedge_type == HedgeType.HALF:
        return tuple(rng.choice(half_options))
    return tuple(full_option)


def propose_neighbor(
    state: SearchState,
    n: int,
    half_target: int,
    full_target: int,
    single_options: Sequence[OutcomeSet],
    half_options: Sequence[OutcomeSet],
    full_option: OutcomeSet,
    rng,
) -> SearchState:
    """Return a neighbouring state; the input state is never modified.

    rng must provide random(), randrange() and choice() (random.Random does).
    """
    if rng.random() < 0.5:
        i = rng.randrange(n)
        current_type = state.types[i]
        if current_type == HedgeType.FULL:
            return state.clone()
        options = single_options if current_type == HedgeType.SINGLE else half_options
        current = tuple(state.system[i])
        available = [tuple(o) for o in options if tuple(o) != current]
        if not available:
            return state.clone()
        return state.replace(i, rng.choice(available))

    if n < 2:
        return state.clone()

    i = rng.randrange(n)
    j = rng.randrange(n)
    while j == i:
        j = rng.randrange(n)

    type_i, type_j = state.types[j], state.types[i]
    candidate = state.replace(
        i, _pick_for_type(type_i, single_options, half_options, full_option, rng), type_i,
    )
    candidate = candidate.replace(
        j, _pick_for_type(type_j, single_options, half_options, full_option, rng), type_j,
    )

    if not hedge_counts_match(candidate, half_target, full_target):
        logger.debug(f"Rejected type swap {i}<->{j}: hedge counts drifted")
        return state.clone()
    return candidate
