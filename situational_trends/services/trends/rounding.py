"""Shared rounding and percentage display helpers.

Every edge or percentage that is both shown and sorted on goes through
these functions so the displayed value and the sort key never diverge.
"""

import math

GREEN_ABOVE = 55.0
RED_BELOW = 45.0


def round_half_up(value: float, step: float = 1.0) -> float:
    """Round to the nearest multiple of step, halves toward +infinity."""
    return math.floor(value / step + 0.5) * step


def round_to_half(value: float) -> float:
    """Round to the nearest half point (-1.25 -> -1.0, 1.25 -> 1.5)."""
    return round_half_up(value, 0.5)


def edge_magnitude(edge: float) -> float:
    """Rounded size of a signed edge. Rounds first, then drops the sign."""
    return abs(round_to_half(edge))


def percentage_tier(pct: float | None) -> str | None:
    """
    Color tier for a historical percentage.

    Green above 55, red below 45, yellow in between (inclusive).
    """
    if pct is None:
        return None
    if pct > GREEN_ABOVE:
        return "green"
    if pct < RED_BELOW:
        return "red"
    return "yellow"


def is_green(pct: float | None) -> bool:
    return percentage_tier(pct) == "green"


def is_yellow(pct: float | None) -> bool:
    return percentage_tier(pct) == "yellow"


def format_pct(pct: float | None) -> str:
    if pct is None:
        return "-"
    return f"{int(round_half_up(pct))}%"
