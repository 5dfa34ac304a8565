"""
Fixture loader - the sample students every scenario indexes.
Challenge: Fail fast with one clear error on a missing file or a bad record.
"""

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from student_search.config import get_settings
from student_search.errors import FixtureLoadError
from student_search.schemas.student import Student

logger = logging.getLogger(__name__)

_students_adapter = TypeAdapter(list[Student])


def load_students(path: str | Path | None = None) -> list[Student]:
    """Read the JSON array of students, in file order. Defaults to settings.students_fixture."""
    fixture = Path(path if path is not None else get_settings().students_fixture)
    try:
        raw = fixture.read_bytes()
    except OSError as e:
        raise FixtureLoadError(str(fixture), e.strerror or str(e)) from e
    try:
        students = _students_adapter.validate_json(raw)
    except ValidationError as e:
        raise FixtureLoadError(str(fixture), f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e
    logger.debug("Loaded %d students from %s", len(students), fixture)
    return students
