"""
Pytest fixtures - sample students, live student index, mocked client (TDD/BDD support).
Challenge: Unit tests run without a cluster; integration tests skip cleanly when none is up.
"""

from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest
from elasticsearch import Elasticsearch

from student_search.config import Settings, get_settings
from student_search.fixtures import load_students
from student_search.schemas.student import Student
from student_search.search.elasticsearch_client import StudentIndex, close_elasticsearch, get_elasticsearch
from student_search.search.health import cluster_available

ROOT = Path(__file__).resolve().parents[1]
FIXTURE_PATH = ROOT / "students.json"


@pytest.fixture(scope="session")
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def students() -> list[Student]:
    """Fresh copy per test; tests may mutate a student before replacing it."""
    return load_students(FIXTURE_PATH)


@pytest.fixture
def students_by_id(students: list[Student]) -> dict[str, Student]:
    return {s.id: s for s in students}


@pytest.fixture(scope="session")
def es_client(settings: Settings) -> Generator[Elasticsearch, None, None]:
    if not cluster_available(settings.elasticsearch_url, verify=settings.elasticsearch_verify_certs):
        pytest.skip(f"Elasticsearch not reachable at {settings.elasticsearch_url}")
    yield get_elasticsearch(settings)
    close_elasticsearch()


@pytest.fixture
def student_index(es_client: Elasticsearch, settings: Settings) -> StudentIndex:
    """Empty student index, recreated for every test."""
    index = StudentIndex.from_settings(settings, client=es_client)
    index.reset()
    return index


@pytest.fixture
def loaded_index(student_index: StudentIndex, students: list[Student]) -> StudentIndex:
    result = student_index.bulk_create(students)
    assert not result.failed
    return student_index


@pytest.fixture
def mock_es() -> MagicMock:
    """Stand-in for the sync Elasticsearch client; options(...) returns the same mock."""
    client = MagicMock()
    client.options.return_value = client
    return client
