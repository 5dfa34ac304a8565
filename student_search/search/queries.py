"""
Query DSL builders - plain dicts in the engine's JSON shape.
Challenge: Every scenario needs an exact wire payload; keep each clause one small function.
Design: No builder objects; the return value is what goes over the wire.
"""

from collections.abc import Iterable, Sequence
from typing import Any

Query = dict[str, Any]

SORT_ORDERS = {"asc", "desc"}
SORT_MODES = {"min", "max", "sum", "avg", "median"}
FIELD_VALUE_MODIFIERS = {"none", "log", "log1p", "log2p", "ln", "ln1p", "ln2p", "square", "sqrt", "reciprocal"}
DECAY_KINDS = {"gauss", "exp", "linear"}
SCORE_MODES = {"multiply", "sum", "avg", "first", "max", "min"}
BOOST_MODES = {"multiply", "replace", "sum", "avg", "max", "min"}


def _drop_none(**params: Any) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def term_query(field: str, value: Any) -> Query:
    """Exact match on a single indexed value."""
    return {"term": {field: {"value": value}}}


def terms_query(field: str, values: Iterable[Any]) -> Query:
    """Exact match on any of several values."""
    values = list(values)
    if not values:
        raise ValueError(f"terms query on {field!r} needs at least one value")
    return {"terms": {field: values}}


def range_query(
    field: str,
    *,
    gte: Any = None,
    gt: Any = None,
    lte: Any = None,
    lt: Any = None,
    format: str | None = None,
) -> Query:
    bounds = _drop_none(gte=gte, gt=gt, lte=lte, lt=lt)
    if not bounds:
        raise ValueError(f"range query on {field!r} needs at least one bound")
    return {"range": {field: {**bounds, **_drop_none(format=format)}}}


def match_query(field: str, text: str, operator: str | None = None) -> Query:
    """Analyzed full-text match. Tokens are OR-ed unless operator="and"."""
    return {"match": {field: {"query": text, **_drop_none(operator=operator)}}}


def bool_query(
    must: Sequence[Query] = (),
    must_not: Sequence[Query] = (),
    should: Sequence[Query] = (),
    filter: Sequence[Query] = (),
    minimum_should_match: int | str | None = None,
) -> Query:
    clauses = {
        "must": list(must),
        "must_not": list(must_not),
        "should": list(should),
        "filter": list(filter),
    }
    body = {k: v for k, v in clauses.items() if v}
    if minimum_should_match is not None:
        body["minimum_should_match"] = minimum_should_match
    return {"bool": body}


def match_all_query() -> Query:
    return {"match_all": {}}


def field_sort(field: str, order: str = "asc", mode: str | None = None) -> dict[str, Any]:
    """One sort key. mode picks the value used for multi-valued (array) fields."""
    if order not in SORT_ORDERS:
        raise ValueError(f"unknown sort order {order!r}")
    if mode is not None and mode not in SORT_MODES:
        raise ValueError(f"unknown sort mode {mode!r}")
    return {field: {"order": order, **_drop_none(mode=mode)}}


# --- function_score functions ---

def field_value_factor(
    field: str,
    factor: float | None = None,
    modifier: str | None = None,
    missing: float | None = None,
) -> dict[str, Any]:
    """Score from a numeric field: modifier(factor * value), missing used when the field is absent."""
    if modifier is not None and modifier not in FIELD_VALUE_MODIFIERS:
        raise ValueError(f"unknown field_value_factor modifier {modifier!r}")
    return {"field_value_factor": {"field": field, **_drop_none(factor=factor, modifier=modifier, missing=missing)}}


def with_weight(function: dict[str, Any], weight: float) -> dict[str, Any]:
    return {**function, "weight": weight}


def filter_function(query: Query, weight: float) -> dict[str, Any]:
    """Constant weight for documents matching query; others get no contribution."""
    return {"filter": query, "weight": weight}


def decay_function(
    kind: str,
    field: str,
    origin: Any,
    scale: Any,
    offset: Any = None,
    decay: float | None = None,
) -> dict[str, Any]:
    """gauss / exp / linear decay around origin. Dates take time values such as "90d"."""
    if kind not in DECAY_KINDS:
        raise ValueError(f"unknown decay function {kind!r}")
    placement = {"origin": origin, "scale": scale, **_drop_none(offset=offset, decay=decay)}
    return {kind: {field: placement}}


def gauss(field: str, origin: Any, scale: Any, offset: Any = None, decay: float | None = None) -> dict[str, Any]:
    return decay_function("gauss", field, origin, scale, offset=offset, decay=decay)


def function_score_query(
    functions: Sequence[dict[str, Any]],
    query: Query | None = None,
    score_mode: str = "sum",
    boost_mode: str = "replace",
    max_boost: float | None = None,
) -> Query:
    """
    Wrap functions around a base query (match_all by default).

    score_mode combines the function results; boost_mode merges that with the base
    query score. With sum/replace a document's score is the sum of its matching functions.
    """
    if score_mode not in SCORE_MODES:
        raise ValueError(f"unknown score_mode {score_mode!r}")
    if boost_mode not in BOOST_MODES:
        raise ValueError(f"unknown boost_mode {boost_mode!r}")
    if not functions:
        raise ValueError("function_score needs at least one function")
    body = {
        "query": query if query is not None else match_all_query(),
        "functions": list(functions),
        "score_mode": score_mode,
        "boost_mode": boost_mode,
    }
    if max_boost is not None:
        body["max_boost"] = max_boost
    return {"function_score": body}


def search_body(
    query: Query,
    sort: Sequence[dict[str, Any]] | None = None,
    from_: int | None = None,
    size: int | None = None,
) -> dict[str, Any]:
    """Search request body. Paging uses the wire names from/size."""
    if from_ is not None and from_ < 0:
        raise ValueError("from must be >= 0")
    if size is not None and size < 0:
        raise ValueError("size must be >= 0")
    body: dict[str, Any] = {"query": query}
    if sort:
        body["sort"] = list(sort)
    if from_ is not None:
        body["from"] = from_
    if size is not None:
        body["size"] = size
    return body
