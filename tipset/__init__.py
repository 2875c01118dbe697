"""Hedged system optimizer for 1X2 pari-mutuel pools."""

from tipset.estimator import estimate_row_value
from tipset.evaluator import evaluate_system
from tipset.models import Event, HedgeType, SearchState, combinations, stake_cost
from tipset.neighborhood import propose_neighbor
from tipset.optimizer import OptimizationResult, OptimizerConfig, optimize

__version__ = "0.1.0"

__all__ = [
    "Event",
    "HedgeType",
    "SearchState",
    "combinations",
    "stake_cost",
    "estimate_row_value",
    "evaluate_system",
    "propose_neighbor",
    "OptimizerConfig",
    "OptimizationResult",
    "optimize",
]
