"""Simulated annealing search for the best hedged system.

Starts from a greedy system (favourite outcome everywhere, the first
`full` events fully hedged and the next `half` half hedged), then walks
the constrained neighbourhood for a fixed number of iterations with
geometric cooling and the Metropolis acceptance rule. The incumbent best
state is returned, never the final current one.
"""

import asyncio
import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from tipset.evaluator import DEGENERATE_POLICIES, evaluate_system
from tipset.models import (
    FULL_OPTION,
    HALF_OPTIONS,
    SINGLE_OPTIONS,
    Event,
    HedgeType,
    InvalidConfiguration,
    SearchState,
    stake_cost,
)
from tipset.neighborhood import propose_neighbor

logger = logging.getLogger(__name__)


@dataclass
class OptimizerConfig:
    """Annealing schedule and estimator parameters for one run."""

    max_iterations: int = 1000
    initial_temperature: float = 1.0
    cooling_rate: float = 0.995
    integration_steps: int = 1000
    integration_limit: float = 6.0
    integrate: bool = True
    degenerate: str = "raise"
    seed: int | None = None

    @classmethod
    def from_settings(cls, settings) -> "OptimizerConfig":
        return cls(
            max_iterations=settings.max_iterations,
            initial_temperature=settings.initial_temperature,
            cooling_rate=settings.cooling_rate,
            integration_steps=settings.integration_steps,
            integration_limit=settings.integration_limit,
            integrate=settings.integrate,
            degenerate=settings.degenerate_policy,
            seed=settings.seed,
        )

    def validate(self) -> None:
        if self.max_iterations < 0:
            raise InvalidConfiguration(f"max_iterations must be >= 0, got {self.max_iterations}")
        if self.initial_temperature <= 0:
            raise InvalidConfiguration("initial_temperature must be positive")
        if not 0 < self.cooling_rate <= 1:
            raise InvalidConfiguration(f"cooling_rate must be in (0, 1], got {self.cooling_rate}")
        if self.degenerate not in DEGENERATE_POLICIES:
            raise InvalidConfiguration(f"Unknown degenerate policy {self.degenerate!r}")


@dataclass
class OptimizationResult:
    """Best system found by one annealing run."""

    state: SearchState
    expected_value: float
    half_target: int
    full_target: int
    iterations: int = 0
    accepted: int = 0
    improvements: int = 0
    cancelled: bool = False
    duration_seconds: float = 0.0
    history: list[float] = field(default_factory=list)  # incumbent best after each iteration

    @property
    def system(self) -> tuple[tuple[str, ...], ...]:
        return self.state.system

    @property
    def stake_cost(self) -> int:
        return stake_cost(self.half_target, self.full_target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "system": self.state.labels(),
            "expected_value": self.expected_value,
            "half": self.half_target,
            "full": self.full_target,
            "stake_cost": self.stake_cost,
            "iterations": self.iterations,
            "accepted": self.accepted,
            "improvements": self.improvements,
            "cancelled": self.cancelled,
            "duration_seconds": self.duration_seconds,
        }


def _accept(delta: float, temperature: float, rng) -> bool:
    """Metropolis rule; once the temperature underflows to zero only improvements pass."""
    if delta > 0:
        return True
    if temperature <= 0:
        return False
    return math.exp(delta / temperature) > rng.random()


def validate_targets(n: int, half_target: int, full_target: int) -> None:
    """Raise InvalidConfiguration unless the hedge targets fit n events."""
    if half_target < 0 or full_target < 0:
        raise InvalidConfiguration(
            f"Hedge targets must be non-negative (half={half_target}, full={full_target})"
        )
    if half_target + full_target > n:
        raise InvalidConfiguration(
            f"half ({half_target}) + full ({full_target}) exceeds {n} events"
        )


def greedy_system(events: Sequence[Event], half_target: int, full_target: int) -> SearchState:
    """Favourite-only system with leading events forced to full then half hedges."""
    validate_targets(len(events), half_target, full_target)

    system: list[tuple[str, ...]] = []
    types: list[HedgeType] = []
    for i, event in enumerate(events):
        if i < full_target:
            system.append(FULL_OPTION)
            types.append(HedgeType.FULL)
        elif i < full_target + half_target:
            system.append(HALF_OPTIONS[0])
            types.append(HedgeType.HALF)
        else:
            system.append((event.favourite(),))
            types.append(HedgeType.SINGLE)
    return SearchState(tuple(system), tuple(types))


def optimize(
    events: Sequence[Event],
    pool_size: float,
    half_target: int,
    full_target: int,
    config: OptimizerConfig | None = None,
    *,
    rng: random.Random | None = None,
    should_cancel: Callable[[], bool] | None = None,
    on_iteration: Callable[[int, float, float], None] | None = None,
) -> OptimizationResult:
    """Search for the system with the highest estimated expected value.

    Args:
        events: Events on the coupon, in coupon order.
        pool_size: Round turnover used by the row estimator.
        half_target: Exact number of half-hedged events.
        full_target: Exact number of fully hedged events.
        config: Annealing schedule; defaults to OptimizerConfig().
        rng: Random source; defaults to random.Random(config.seed).
        should_cancel: Checked between iterations; returning True stops the
            search and returns the best state so far.
        on_iteration: Called with (iteration, current_value, best_value).

    Raises:
        InvalidConfiguration: bad hedge targets or schedule.
        MalformedEvent: an event's probabilities or shares are out of range.
        DegenerateProbabilityModel: with the "raise" policy, a row had zero
            share variance.
    """
    config = config or OptimizerConfig()
    config.validate()
    for event in events:
        event.validate()
    validate_targets(len(events), half_target, full_target)
    if rng is None:
        rng = random.Random(config.seed)

    n = len(events)

    def value_of(state: SearchState) -> float:
        return evaluate_system(
            state.system, events, pool_size,
            degenerate=config.degenerate,
            steps=config.integration_steps,
            limit=config.integration_limit,
            integrate=config.integrate,
        )

    start = time.monotonic()
    current = greedy_system(events, half_target, full_target)
    current_value = value_of(current)
    best = current.clone()
    best_value = current_value
    logger.info(
        f"Annealing {n} events (half={half_target}, full={full_target}, "
        f"{current.row_count} rows), greedy EV {current_value:.4f}"
    )

    result = OptimizationResult(
        state=best, expected_value=best_value,
        half_target=half_target, full_target=full_target,
    )

    temperature = config.initial_temperature
    can_move = n > 0

    for iteration in range(config.max_iterations):
        if should_cancel is not None and should_cancel():
            logger.info(f"Annealing cancelled after {iteration} iterations")
            result.cancelled = True
            break

        temperature *= config.cooling_rate
        if can_move:
            neighbor = propose_neighbor(
                current, n, half_target, full_target,
                SINGLE_OPTIONS, HALF_OPTIONS, FULL_OPTION, rng,
            )
            neighbor_value = value_of(neighbor)
            delta = neighbor_value - current_value
            if _accept(delta, temperature, rng):
                current = neighbor
                current_value = neighbor_value
                result.accepted += 1
                if current_value > best_value:
                    best = current.clone()
                    best_value = current_value
                    result.improvements += 1
                    logger.debug(f"Iteration {iteration}: new best EV {best_value:.4f}")

        result.iterations = iteration + 1
        result.history.append(best_value)
        if on_iteration is not None:
            on_iteration(iteration, current_value, best_value)

    result.state = best
    result.expected_value = best_value
    result.duration_seconds = round(time.monotonic() - start, 3)
    logger.info(
        f"Best EV {best_value:.4f} after {result.iterations} iterations "
        f"({result.accepted} accepted, {result.improvements} improvements) "
        f"in {result.duration_seconds:.2f}s"
    )
    return result


async def optimize_targets(
    events: Sequence[Event],
    pool_size: float,
    targets: Sequence[tuple[int, int]],
    config: OptimizerConfig | None = None,
) -> dict[tuple[int, int], OptimizationResult]:
    """Run independent searches for several (half, full) targets concurrently.

    Each run gets its own random source seeded from config.seed plus the
    target's position, so results are reproducible when a seed is set.
    """
    config = config or OptimizerConfig()
    base_seed = config.seed

    async def _run(idx: int, half: int, full: int) -> OptimizationResult:
        seed = None if base_seed is None else base_seed + idx
        return await asyncio.to_thread(
            optimize, events, pool_size, half, full, config,
            rng=random.Random(seed),
        )

    results = await asyncio.gather(
        *(_run(idx, half, full) for idx, (half, full) in enumerate(targets))
    )
    return {tuple(target): result for target, result in zip(targets, results)}
