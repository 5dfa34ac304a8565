"""
Every query scenario against a live cluster loaded with the sample students.
"""

import pytest

from student_search.search.results import assert_document_ids, assert_document_scores
from student_search.search.scenarios import SCENARIOS, get_scenario, run_scenario
from student_search.search.scoring import apply_boost_mode, combine_function_scores, field_value_factor

pytestmark = pytest.mark.integration


@pytest.mark.parametrize("scenario", SCENARIOS, ids=lambda s: s.name)
def test_scenario(loaded_index, scenario):
    outcome = run_scenario(loaded_index, scenario)
    assert outcome.passed, outcome.problems


def test_paging_second_page(loaded_index):
    body = dict(get_scenario("paging_conduct_score").body, **{"from": 2})
    assert_document_ids(loaded_index.search(body), ["101", "104"], ordered=True)


def test_function_score_is_sum_of_matching_functions(loaded_index, students):
    result = loaded_index.search(get_scenario("filter_and_weight").body)
    expected = {}
    for s in students:
        contributions = [(field_value_factor(s.grade), 0.5)]
        if "財務金融" in s.departments:
            contributions.append((1.0, 3.0))
        if any(c.name == "程式設計" for c in s.courses):
            contributions.append((1.0, 1.5))
        expected[s.id] = apply_boost_mode(1.0, combine_function_scores(contributions, "sum"), "replace")
    assert_document_scores(result, expected)
