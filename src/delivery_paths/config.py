from __future__ import annotations

import os

# Cost reported alongside each shortest distance is distance * factor.
DEFAULT_COST_FACTOR = 5
COST_FACTOR_ENV = "DELIVERY_COST_FACTOR"


def get_cost_factor() -> int:
    raw = os.environ.get(COST_FACTOR_ENV, "").strip()
    if not raw:
        return DEFAULT_COST_FACTOR
    return parse_cost_factor(raw, source=COST_FACTOR_ENV)


def parse_cost_factor(value: object, source: str = "cost factor") -> int:
    try:
        factor = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{source} must be an integer, got {value!r}") from None
    if factor < 0:
        raise ValueError(f"{source} must be non-negative, got {factor}")
    return factor
