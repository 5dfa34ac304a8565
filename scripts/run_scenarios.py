#!/usr/bin/env python3
"""
Run the query scenarios against a live cluster and report pass/fail per scenario.
The index is reset and reloaded from the fixture first. Exit status 1 if any scenario fails.
  python scripts/run_scenarios.py
  python scripts/run_scenarios.py --only gauss_conduct_score --only term_grade
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from student_search.config import get_settings
from student_search.fixtures import load_students
from student_search.search.elasticsearch_client import StudentIndex, close_elasticsearch
from student_search.search.health import cluster_available
from student_search.search.scenarios import SCENARIOS, get_scenario, run_scenario


def main():
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Run student query scenarios")
    ap.add_argument("--only", action="append", default=[], help="Scenario name (repeatable); default all")
    ap.add_argument("--list", action="store_true", help="List scenario names and exit")
    args = ap.parse_args()

    if args.list:
        for scenario in SCENARIOS:
            print(f"{scenario.name:40s} {scenario.description}")
        return

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    scenarios = [get_scenario(name) for name in args.only] if args.only else list(SCENARIOS)

    if not cluster_available(settings.elasticsearch_url, verify=settings.elasticsearch_verify_certs):
        print(f"Elasticsearch is not reachable at {settings.elasticsearch_url}")
        sys.exit(1)

    index = StudentIndex.from_settings(settings)
    failures = 0
    try:
        index.reset()
        index.bulk_create(load_students())
        for scenario in scenarios:
            outcome = run_scenario(index, scenario)
            status = "PASS" if outcome.passed else "FAIL"
            print(f"[{status}] {scenario.name}: {outcome.hit_ids}")
            for problem in outcome.problems:
                print(f"       {problem}")
            failures += not outcome.passed
    finally:
        close_elasticsearch()

    print(f"\n{len(scenarios) - failures}/{len(scenarios)} scenarios passed")
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
