#!/usr/bin/env python3
"""
Reset the student index and bulk-load the sample students.
Reads ELASTICSEARCH_URL / STUDENT_INDEX from .env (default http://localhost:9200, index "student").
  python scripts/seed_students.py
  python scripts/seed_students.py --fixture other_students.json --index student_copy
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from student_search.config import get_settings
from student_search.errors import FixtureLoadError
from student_search.fixtures import load_students
from student_search.search.elasticsearch_client import StudentIndex, close_elasticsearch
from student_search.search.health import cluster_available


def main():
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Reset the student index and load the fixture")
    ap.add_argument("--fixture", default=settings.students_fixture, help="Path to students JSON")
    ap.add_argument("--index", default=settings.student_index, help="Index name")
    args = ap.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not cluster_available(settings.elasticsearch_url, verify=settings.elasticsearch_verify_certs):
        print(f"Elasticsearch is not reachable at {settings.elasticsearch_url}")
        sys.exit(1)

    try:
        students = load_students(args.fixture)
    except FixtureLoadError as e:
        print(e)
        sys.exit(1)

    index = StudentIndex.from_settings(settings.model_copy(update={"student_index": args.index}))
    try:
        index.reset()
        result = index.bulk_create(students)
    finally:
        close_elasticsearch()

    if result.failed:
        print(f"{len(result.failed)} of {len(result.items)} students failed:")
        for item in result.failed:
            print(f"  {item.id}: {item.status} {item.error}")
        sys.exit(1)
    print(f"Loaded {len(result.items)} students into '{args.index}'.")
    print(f"Try: curl -s '{settings.elasticsearch_url.rstrip('/')}/{args.index}/_count?pretty'")


if __name__ == "__main__":
    main()
