"""Numeric helpers shared by rankings and usage reporting."""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero (2.345 -> 2.35), unlike built-in ``round``.

    Goes through ``repr`` so binary artifacts such as 2.675 -> 2.67499... do
    not leak into the result.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentile(rank: int, total: int) -> float:
    """Share of the population strictly behind ``rank``, in percent (2 places)."""
    if total <= 0:
        return 0.0
    return round_half_up((total - rank) / total * 100, 2)
