"""
Named query scenarios against the four sample students.
Challenge: Each scenario pins one query shape to the exact hits (or scores) the engine must return.
Design: Scenarios are data (payload + expectation); run_scenario issues the search and compares.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from student_search.search import queries as q
from student_search.search.elasticsearch_client import StudentIndex
from student_search.search.results import DEFAULT_TOLERANCE, hit_ids, ids_match, score_map, score_mismatches

logger = logging.getLogger(__name__)

# Function-score settings shared by every scoring scenario
SCORE_MODE = "sum"
BOOST_MODE = "replace"
MAX_BOOST = 100.0

# 2022-07-23T16:00:00Z
DATE_ORIGIN_MILLIS = 1658592000000


@dataclass(frozen=True)
class QueryScenario:
    name: str
    description: str
    body: dict[str, Any]
    expected_ids: tuple[str, ...] | None = None
    ordered: bool = False
    expected_scores: dict[str, float] | None = None
    tolerance: float = DEFAULT_TOLERANCE


@dataclass
class ScenarioOutcome:
    scenario: QueryScenario
    hit_ids: list[str]
    scores: dict[str, float | None]
    problems: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.problems


def _scored(functions: list[dict[str, Any]]) -> dict[str, Any]:
    return q.search_body(
        q.function_score_query(
            functions,
            score_mode=SCORE_MODE,
            boost_mode=BOOST_MODE,
            max_boost=MAX_BOOST,
        )
    )


def _filter_and_weight_functions(department_field: str) -> list[dict[str, Any]]:
    return [
        q.filter_function(q.term_query(department_field, "財務金融"), 3.0),
        q.filter_function(q.term_query("courses.name.keyword", "程式設計"), 1.5),
        q.with_weight(q.field_value_factor("grade"), 0.5),
    ]


SCENARIOS: tuple[QueryScenario, ...] = (
    QueryScenario(
        name="term_grade",
        description="term: grade = 3",
        body=q.search_body(q.term_query("grade", 3)),
        expected_ids=("102",),
    ),
    QueryScenario(
        name="terms_departments",
        description="terms: departments.keyword in (資訊管理, 企業管理)",
        body=q.search_body(q.terms_query("departments.keyword", ["資訊管理", "企業管理"])),
        expected_ids=("103", "104"),
    ),
    QueryScenario(
        name="range_grade",
        description="range: 2 <= grade <= 4",
        body=q.search_body(q.range_query("grade", gte=2, lte=4)),
        expected_ids=("101", "102", "103"),
    ),
    QueryScenario(
        name="range_english_issued_date",
        description="range: 2021-07-01 <= englishIssuedDate < 2022-07-01",
        body=q.search_body(q.range_query("englishIssuedDate", gte="2021-07-01", lt="2022-07-01")),
        expected_ids=("102", "104"),
    ),
    QueryScenario(
        name="match_introduction",
        description="match: introduction ~ 'company career'",
        body=q.search_body(q.match_query("introduction", "company career")),
        expected_ids=("103", "104"),
    ),
    QueryScenario(
        name="bool_composition",
        description="bool: must grade < 4, must_not job.primary = false, should course or department",
        body=q.search_body(
            q.bool_query(
                must=[q.range_query("grade", lt=4)],
                must_not=[q.term_query("job.primary", False)],
                should=[
                    q.term_query("courses.name.keyword", "會計學"),
                    q.term_query("departments.keyword", "財務金融"),
                ],
            )
        ),
        expected_ids=("103",),
    ),
    QueryScenario(
        name="sort_course_point_then_name",
        description="sort: max(courses.point) desc, then name.keyword asc",
        body=q.search_body(
            q.match_all_query(),
            sort=[
                q.field_sort("courses.point", order="desc", mode="max"),
                q.field_sort("name.keyword", order="asc"),
            ],
        ),
        expected_ids=("102", "103", "101", "104"),
        ordered=True,
    ),
    QueryScenario(
        name="paging_conduct_score",
        description="paging: conductScore desc, from 0 size 2",
        body=q.search_body(
            q.match_all_query(),
            sort=[q.field_sort("conductScore", order="desc")],
            from_=0,
            size=2,
        ),
        expected_ids=("103", "102"),
        ordered=True,
    ),
    QueryScenario(
        name="field_value_factor_grade",
        description="function_score: (grade * 0.5)^2, missing 0",
        body=_scored([q.field_value_factor("grade", factor=0.5, modifier="square", missing=0.0)]),
        expected_scores={"101": 4.0, "102": 2.25, "103": 1.0, "104": 0.25},
    ),
    QueryScenario(
        name="filter_and_weight",
        description="function_score: finance department 3.0 + programming course 1.5 + grade * 0.5",
        body=_scored(_filter_and_weight_functions("departments.keyword")),
        expected_scores={"103": 5.5, "101": 5.0, "102": 1.5, "104": 0.5},
    ),
    QueryScenario(
        # department (singular) is not a field of any student, so that filter never matches
        name="filter_and_weight_singular_department",
        description="function_score: as filter_and_weight, filtering on the unmapped department.keyword",
        body=_scored(_filter_and_weight_functions("department.keyword")),
        expected_scores={"103": 2.5, "101": 2.0, "102": 1.5, "104": 0.5},
    ),
    QueryScenario(
        name="gauss_conduct_score",
        description="function_score: gauss on conductScore, origin 100 offset 15 scale 10 decay 0.5",
        body=_scored([q.gauss("conductScore", origin=100, scale=10, offset=15, decay=0.5)]),
        expected_scores={"103": 1.0, "102": 0.9726, "101": 0.4322, "104": 0.2570},
    ),
    QueryScenario(
        name="gauss_english_issued_date",
        description="function_score: gauss on englishIssuedDate, offset 90d scale 270d decay 0.5",
        body=_scored([q.gauss("englishIssuedDate", origin=DATE_ORIGIN_MILLIS, scale="270d", offset="90d", decay=0.5)]),
        expected_scores={"102": 1.0, "104": 0.8195, "101": 0.2378, "103": 0.1132},
    ),
)

_BY_NAME = {scenario.name: scenario for scenario in SCENARIOS}


def get_scenario(name: str) -> QueryScenario:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"unknown scenario {name!r}; known: {', '.join(_BY_NAME)}") from None


def run_scenario(index: StudentIndex, scenario: QueryScenario) -> ScenarioOutcome:
    """Search with the scenario payload and compare hits/scores. The index must already hold the fixture."""
    result = index.search(scenario.body)
    outcome = ScenarioOutcome(scenario=scenario, hit_ids=hit_ids(result), scores=score_map(result))
    if scenario.expected_ids is not None and not ids_match(outcome.hit_ids, scenario.expected_ids, scenario.ordered):
        outcome.problems.append(
            f"hit ids {outcome.hit_ids} != expected {list(scenario.expected_ids)}"
            f" ({'ordered' if scenario.ordered else 'any order'})"
        )
    if scenario.expected_scores is not None:
        outcome.problems.extend(score_mismatches(outcome.scores, scenario.expected_scores, scenario.tolerance))
    if outcome.passed:
        logger.debug("scenario %s passed", scenario.name)
    else:
        logger.info("scenario %s failed: %s", scenario.name, "; ".join(outcome.problems))
    return outcome
