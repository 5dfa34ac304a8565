"""
Reference formulas for function_score - what the engine computes per document.
Challenge: Expected scores in scenarios are literals; these functions show where they come from.
Design: Pure math on single values. Nothing here evaluates a query.
"""

import math
import re
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TIME_UNITS_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}
_TIME_VALUE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d)\s*$")


def parse_time_value(value: str | int | float) -> float:
    """Time value ("90d", "12h", "500ms") to milliseconds. Bare numbers are already milliseconds."""
    if isinstance(value, (int, float)):
        return float(value)
    m = _TIME_VALUE.match(value)
    if not m:
        raise ValueError(f"unsupported time value {value!r}")
    amount, unit = m.groups()
    return float(amount) * _TIME_UNITS_MS[unit]


def to_epoch_millis(value: datetime) -> int:
    """Milliseconds since epoch; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


def _distance(value: float, origin: float, offset: float) -> float:
    return max(0.0, abs(value - origin) - offset)


def _check_decay(scale: float, decay: float) -> None:
    if scale <= 0:
        raise ValueError("scale must be > 0")
    if not 0 < decay < 1:
        raise ValueError("decay must be in (0, 1)")


def gauss_decay(value: float, origin: float, scale: float, offset: float = 0.0, decay: float = 0.5) -> float:
    """exp(max(0, |v - origin| - offset)^2 * ln(decay) / scale^2). Equals decay at offset + scale."""
    _check_decay(scale, decay)
    d = _distance(value, origin, offset)
    return math.exp(d * d * math.log(decay) / (scale * scale))


def exp_decay(value: float, origin: float, scale: float, offset: float = 0.0, decay: float = 0.5) -> float:
    _check_decay(scale, decay)
    return math.exp(math.log(decay) / scale * _distance(value, origin, offset))


def linear_decay(value: float, origin: float, scale: float, offset: float = 0.0, decay: float = 0.5) -> float:
    _check_decay(scale, decay)
    s = scale / (1.0 - decay)
    return max(0.0, (s - _distance(value, origin, offset)) / s)


def gauss_decay_date(
    value: datetime,
    origin: datetime | int,
    scale: str | int,
    offset: str | int = 0,
    decay: float = 0.5,
) -> float:
    """Gaussian decay on a date field; origin as datetime or epoch millis, scale/offset as time values."""
    origin_ms = origin if isinstance(origin, int) else to_epoch_millis(origin)
    return gauss_decay(
        to_epoch_millis(value),
        origin_ms,
        parse_time_value(scale),
        offset=parse_time_value(offset),
        decay=decay,
    )


_MODIFIERS = {
    "none": lambda x: x,
    "log": math.log10,
    "log1p": lambda x: math.log10(x + 1),
    "log2p": lambda x: math.log10(x + 2),
    "ln": math.log,
    "ln1p": math.log1p,
    "ln2p": lambda x: math.log(x + 2),
    "square": lambda x: x * x,
    "sqrt": math.sqrt,
    "reciprocal": lambda x: 1.0 / x,
}


def field_value_factor(
    value: float | None,
    factor: float = 1.0,
    modifier: str = "none",
    missing: float | None = None,
) -> float:
    """modifier(factor * value); missing replaces an absent value."""
    if modifier not in _MODIFIERS:
        raise ValueError(f"unknown modifier {modifier!r}")
    if value is None:
        if missing is None:
            raise ValueError("field has no value and no missing default")
        value = missing
    return float(_MODIFIERS[modifier](factor * value))


def combine_function_scores(contributions: Sequence[tuple[float, float]], score_mode: str = "multiply") -> float:
    """
    Combine (score, weight) pairs of the functions that matched a document.

    avg is weighted: sum(score * weight) / sum(weight). With no matching function the result is 1.0.
    """
    if not contributions:
        return 1.0
    weighted = [score * weight for score, weight in contributions]
    if score_mode == "multiply":
        return math.prod(weighted)
    if score_mode == "sum":
        return math.fsum(weighted)
    if score_mode == "avg":
        return math.fsum(weighted) / math.fsum(weight for _, weight in contributions)
    if score_mode == "first":
        return weighted[0]
    if score_mode == "max":
        return max(weighted)
    if score_mode == "min":
        return min(weighted)
    raise ValueError(f"unknown score_mode {score_mode!r}")


def apply_boost_mode(
    query_score: float,
    function_score: float,
    boost_mode: str = "multiply",
    max_boost: float | None = None,
) -> float:
    """Merge the combined function score into the base query score. max_boost caps the function score."""
    if max_boost is not None:
        function_score = min(function_score, max_boost)
    if boost_mode == "multiply":
        return query_score * function_score
    if boost_mode == "replace":
        return function_score
    if boost_mode == "sum":
        return query_score + function_score
    if boost_mode == "avg":
        return (query_score + function_score) / 2
    if boost_mode == "max":
        return max(query_score, function_score)
    if boost_mode == "min":
        return min(query_score, function_score)
    raise ValueError(f"unknown boost_mode {boost_mode!r}")
