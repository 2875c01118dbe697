"""Plain-text rendering of rounds and optimized systems for the console."""

from typing import Sequence

from tipset.models import Event
from tipset.optimizer import OptimizationResult
from tipset.rounds import Round


def format_round(draw: Round) -> str:
    lines = [
        f"{draw.product_name} {draw.draw_number or ''}".rstrip(),
        f"Turnover: {draw.turnover} kr",
        f"Net pot: {draw.net_pot:.2f} kr",
        f"Payout: {draw.payout:.2f} kr",
        f"Jackpot: {draw.jackpot:g} kr",
    ]
    return "\n".join(lines)


def format_system(result: OptimizationResult, events: Sequence[Event]) -> str:
    """One line per event with its outcome set, then EV and stake cost."""
    labels = result.state.labels()
    width = max((len(f"{e.index}. {e.description}") for e in events), default=0)
    lines = []
    for event, label in zip(events, labels):
        name = f"{event.index}. {event.description}"
        lines.append(f"{name:<{width}}  {label}")
    lines.append(f"{'EV':<{width}}  {result.expected_value:.2f}")
    lines.append(f"{'Cost':<{width}}  {result.stake_cost} kr")
    if result.cancelled:
        lines.append("(search cancelled before completion)")
    return "\n".join(lines)
