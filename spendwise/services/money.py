"""Money / rounding helpers.

Centralized so aggregation, budget evaluation and API responses share the
same rounding and zero-guard semantics. Internal math stays unrounded; round2
is applied only to values leaving the service.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator == 0:
        return default
    return numerator / denominator
