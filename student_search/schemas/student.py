"""Student document schema - the record stored in the student index."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Course(BaseModel):
    name: str
    point: int


class Job(BaseModel):
    name: str
    primary: bool | None = None


class Student(BaseModel):
    """One student. JSON keys are camelCase (conductScore, englishIssuedDate); attributes are snake_case."""

    id: str
    name: str
    departments: list[str] = []
    courses: list[Course] = []
    grade: int
    conduct_score: int
    job: Job
    introduction: str
    english_issued_date: datetime

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_document(self) -> dict[str, Any]:
        """JSON-ready _source body (camelCase keys, ISO-8601 dates)."""
        return self.model_dump(mode="json", by_alias=True)
