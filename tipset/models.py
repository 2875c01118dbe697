"""Core data model for 1X2 pool systems.

An Event carries the odds-implied probabilities and public money shares for
one match. A system assigns an outcome set (single, half or full hedge) to
every event, and SearchState pairs that system with explicit hedge type tags
so the optimizer can keep the half/full counts fixed while it mutates rows.
"""

from dataclasses import dataclass
from enum import IntEnum


OUTCOMES = ("1", "X", "2")

SINGLE_OPTIONS: tuple[tuple[str, ...], ...] = (("1",), ("X",), ("2",))
HALF_OPTIONS: tuple[tuple[str, ...], ...] = (("1", "X"), ("1", "2"), ("X", "2"))
FULL_OPTION: tuple[str, ...] = ("1", "X", "2")

OutcomeSet = tuple[str, ...]


# ──────────────────────────────────────────────
# Typed failures
# ──────────────────────────────────────────────

class TipsetError(Exception):
    """Base class for all recoverable tipset failures."""

    pass


class InvalidConfiguration(TipsetError):
    """Hedge targets or optimizer parameters cannot produce a valid system."""

    pass


class DegenerateProbabilityModel(TipsetError):
    """Share variance for a row is zero, so the normal approximation is undefined."""

    def __init__(self, row: str, message: str | None = None):
        self.row = row
        super().__init__(message or f"Zero share variance for row {row!r}")


class MalformedEvent(TipsetError):
    """Probability tuple out of range or row symbol outside 1/X/2."""

    pass


class RoundDataError(TipsetError):
    """Round data could not be fetched or parsed."""

    pass


class HedgeType(IntEnum):
    """Coverage breadth of one event; the value is the outcome set size."""

    SINGLE = 1
    HALF = 2
    FULL = 3

    @classmethod
    def of(cls, outcome_set: OutcomeSet) -> "HedgeType":
        try:
            return cls(len(outcome_set))
        except ValueError:
            raise MalformedEvent(f"Outcome set must hold 1-3 outcomes, got {outcome_set!r}")


@dataclass(frozen=True)
class Event:
    """One match on the coupon, read-only for a whole optimization run."""

    index: int
    description: str
    probabilities: tuple[float, float, float]  # odds-implied (1, X, 2)
    shares: tuple[float, float, float]         # public money (1, X, 2)

    def validate(self) -> None:
        """Raise MalformedEvent unless both tuples hold three values in [0, 1]."""
        for name, values in (("probabilities", self.probabilities), ("shares", self.shares)):
            if len(values) != 3:
                raise MalformedEvent(
                    f"Event {self.index} {name} must have 3 values, got {len(values)}"
                )
            for v in values:
                if not 0.0 <= v <= 1.0:
                    raise MalformedEvent(
                        f"Event {self.index} {name} value {v} outside [0, 1]"
                    )

    def favourite(self) -> str:
        """Outcome with the highest odds-implied probability (first wins ties)."""
        best = 0
        for j in range(1, 3):
            if self.probabilities[j] > self.probabilities[best]:
                best = j
        return OUTCOMES[best]

    def probability(self, outcome: str) -> float:
        return self.probabilities[outcome_index(outcome)]

    def share(self, outcome: str) -> float:
        return self.shares[outcome_index(outcome)]


def outcome_index(outcome: str) -> int:
    """Position of an outcome symbol in (1, X, 2)."""
    try:
        return OUTCOMES.index(outcome)
    except ValueError:
        raise MalformedEvent(f"Unknown outcome symbol {outcome!r}")


def combinations(option_lists) -> list[str]:
    """Cross product of per-event outcome sets as row strings.

    Rows come out in outcome-major order for the earliest event, so
    [["1", "X"], ["1", "2"]] gives ["11", "12", "X1", "X2"]. No events
    gives the single empty row.
    """
    rows = [""]
    for options in option_lists:
        rows = [prefix + value for prefix in rows for value in options]
    return rows


def stake_cost(half: int, full: int) -> int:
    """Number of rows (and so unit stakes) for a half/full hedge budget."""
    return 2 ** half * 3 ** full


@dataclass(frozen=True)
class SearchState:
    """A system plus its hedge type tags.

    Frozen tuples give value semantics: every mutation builds a new state,
    so the optimizer's current and best states never share anything mutable.
    """

    system: tuple[OutcomeSet, ...]
    types: tuple[HedgeType, ...]

    @classmethod
    def from_system(cls, system) -> "SearchState":
        """Build a state whose hedge types follow the outcome set sizes."""
        frozen = tuple(tuple(outcome_set) for outcome_set in system)
        return cls(frozen, tuple(HedgeType.of(o) for o in frozen))

    def clone(self) -> "SearchState":
        return SearchState(tuple(tuple(o) for o in self.system), tuple(self.types))

    def replace(self, index: int, outcome_set: OutcomeSet, hedge_type: HedgeType | None = None) -> "SearchState":
        """Return a copy with one event's outcome set (and optionally type) replaced."""
        system = list(self.system)
        types = list(self.types)
        system[index] = tuple(outcome_set)
        if hedge_type is not None:
            types[index] = hedge_type
        return SearchState(tuple(system), tuple(types))

    def count(self, hedge_type: HedgeType) -> int:
        return sum(1 for t in self.types if t == hedge_type)

    def rows(self) -> list[str]:
        return combinations(self.system)

    @property
    def row_count(self) -> int:
        total = 1
        for outcome_set in self.system:
            total *= len(outcome_set)
        return total

    def labels(self) -> list[str]:
        """Outcome sets joined for display, e.g. ["1", "1X", "1X2"]."""
        return ["".join(o) for o in self.system]
