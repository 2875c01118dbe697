"""Expected value of a single pool row.

The number of other bettors holding exactly the same row is modelled as a
sum of independent Bernoulli matches (one per event, success probability
equal to the public share of the picked outcome) and approximated by a
normal distribution. The row's value is the ratio of its true probability
to its popularity, scaled by a pool-size dependent correction for how
many winners share the pot.
"""

import math
from typing import Callable, Sequence

from tipset.models import (
    DegenerateProbabilityModel,
    Event,
    InvalidConfiguration,
    MalformedEvent,
    outcome_index,
)


INTEGRATION_STEPS = 1000
INTEGRATION_LIMIT = 6.0

# Abramowitz & Stegun 7.1.26, |error| <= 1.5e-7
_ERF_P = 0.3275911
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)

_SQRT_2 = math.sqrt(2.0)
_SQRT_2PI = math.sqrt(2.0 * math.pi)


# ──────────────────────────────────────────────
# Normal distribution helpers
# ──────────────────────────────────────────────

def erf(x: float) -> float:
    """Error function via the five-term rational approximation."""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    a1, a2, a3, a4, a5 = _ERF_A
    t = 1.0 / (1.0 + _ERF_P * x)
    y = 1.0 - (((((a5 * t + a4) * t) + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y


def normal_cdf(x: float) -> float:
    return 0.5 * (1.0 + erf(x / _SQRT_2))


def normal_pdf(t: float) -> float:
    return math.exp(-t * t / 2.0) / _SQRT_2PI


def simpson(f: Callable[[float], float], a: float, b: float, n: int) -> float:
    """Composite Simpson's rule over [a, b] with n subintervals (rounded up to even)."""
    if n < 2:
        n = 2
    if n % 2:
        n += 1
    h = (b - a) / n
    total = f(a) + f(b)
    for i in range(1, n):
        total += (2 if i % 2 == 0 else 4) * f(a + i * h)
    return h / 3.0 * total


# ──────────────────────────────────────────────
# Row estimate
# ──────────────────────────────────────────────

def row_moments(row: str, events: Sequence[Event]) -> tuple[float, float, float, float]:
    """Share sum, share variance, odds product and share product for a row.

    Returns (sum_shares, var_shares, odds_product, share_product).
    """
    if len(row) != len(events):
        raise MalformedEvent(
            f"Row {row!r} has {len(row)} picks for {len(events)} events"
        )

    sum_shares = 0.0
    var_shares = 0.0
    odds_product = 1.0
    share_product = 1.0
    for symbol, event in zip(row, events):
        j = outcome_index(symbol)
        f = event.shares[j]
        sum_shares += f
        var_shares += f * (1.0 - f)
        odds_product *= event.probabilities[j]
        share_product *= f
    return sum_shares, var_shares, odds_product, share_product


def winners_adjustment(m_star: float, pool_size: float) -> float:
    """Correction for the number of co-winners at standardized distance m_star.

    The exponent pool_size + 1 counts this bettor plus the pool.
    """
    upper = normal_cdf(0.5 + m_star)
    lower = normal_cdf(-0.5 + m_star)
    k = pool_size + 1
    return upper ** k - lower ** k - upper + lower


def estimate_row_value(
    row: str,
    events: Sequence[Event],
    pool_size: float,
    *,
    steps: int = INTEGRATION_STEPS,
    limit: float = INTEGRATION_LIMIT,
    integrate: bool = True,
) -> float:
    """Approximate expected payout of one fully specified row.

    Args:
        row: One symbol per event from "1", "X", "2".
        events: Event models, in the same order as the row.
        pool_size: Total stake volume (turnover), non-negative.
        steps: Simpson subintervals for the density integral.
        limit: Integrate the density over [-limit, limit].
        integrate: When False, skip the integral and use the adjustment term
            directly (the integrand does not depend on t).

    Raises:
        DegenerateProbabilityModel: share variance is zero for a backed row.
        MalformedEvent: row length or symbols do not match the events.
    """
    if pool_size < 0:
        raise InvalidConfiguration(f"pool_size must be non-negative, got {pool_size}")

    sum_shares, var_shares, odds_product, share_product = row_moments(row, events)
    if share_product == 0:
        return 0.0
    if var_shares <= 0:
        raise DegenerateProbabilityModel(row)

    g = len(row)
    m_star = (g - sum_shares) / math.sqrt(var_shares)
    share_ratio = odds_product / share_product
    adjustment = winners_adjustment(m_star, pool_size)

    if not integrate:
        return share_ratio * adjustment

    approx = simpson(lambda t: adjustment * normal_pdf(t), -limit, limit, steps)
    return share_ratio * approx
