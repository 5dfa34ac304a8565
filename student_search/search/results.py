"""Comparing search results with expected ids and scores."""

from collections.abc import Mapping, Sequence

from student_search.schemas.search import SearchResult

DEFAULT_TOLERANCE = 1e-4


def hit_ids(result: SearchResult) -> list[str]:
    """Document ids in hit order."""
    return [hit.id for hit in result.hits]


def score_map(result: SearchResult) -> dict[str, float | None]:
    return {hit.id: hit.score for hit in result.hits}


def ids_match(actual: Sequence[str], expected: Sequence[str], ordered: bool) -> bool:
    """Ordered: same sequence. Unordered: same ids, same multiplicity."""
    if ordered:
        return list(actual) == list(expected)
    return sorted(actual) == sorted(expected)


def score_mismatches(
    actual: Mapping[str, float | None],
    expected: Mapping[str, float],
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[str]:
    """One message per expected id that is missing or off by more than tolerance. Empty means match."""
    problems = []
    for doc_id, want in expected.items():
        got = actual.get(doc_id)
        if got is None:
            problems.append(f"{doc_id}: no score (expected {want})")
        elif abs(got - want) > tolerance:
            problems.append(f"{doc_id}: score {got:.6f} != {want} (tolerance {tolerance})")
    return problems


def assert_document_ids(result: SearchResult, expected: Sequence[str], ordered: bool = False) -> None:
    """Raise AssertionError unless the hit ids equal expected (as a sequence when ordered)."""
    actual = hit_ids(result)
    if not ids_match(actual, expected, ordered):
        raise AssertionError(
            f"hit ids {actual} != expected {list(expected)} ({'ordered' if ordered else 'any order'})"
        )


def assert_document_scores(
    result: SearchResult,
    expected: Mapping[str, float],
    tolerance: float = DEFAULT_TOLERANCE,
) -> None:
    problems = score_mismatches(score_map(result), expected, tolerance)
    if problems:
        raise AssertionError("; ".join(problems))
