"""
Typed views over Elasticsearch responses.
Challenge: Client returns ObjectApiResponse or plain dict depending on call path; normalise both.
Design: Parse once at the wrapper boundary so callers never index into raw JSON.
"""

from typing import Any

from pydantic import BaseModel

from student_search.schemas.student import Student


def response_body(response: Any) -> dict[str, Any]:
    """Response may be ObjectApiResponse; support both .body and dict access."""
    return getattr(response, "body", response)


class WriteResult(BaseModel):
    """Outcome of create / index / delete on a single document."""

    id: str
    result: str
    version: int | None = None

    @classmethod
    def from_response(cls, response: Any) -> "WriteResult":
        body = response_body(response)
        return cls(id=body["_id"], result=body.get("result", ""), version=body.get("_version"))


class BulkItemResult(BaseModel):
    id: str | None
    status: int
    error: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status < 300


class BulkResult(BaseModel):
    """Per-item statuses of a bulk request. Failures are reported here, never raised."""

    errors: bool
    items: list[BulkItemResult]

    @classmethod
    def from_response(cls, response: Any) -> "BulkResult":
        body = response_body(response)
        items = []
        for entry in body.get("items", []):
            # Each entry is keyed by its action: {"create": {...}}
            (outcome,) = entry.values()
            items.append(
                BulkItemResult(id=outcome.get("_id"), status=outcome["status"], error=outcome.get("error"))
            )
        return cls(errors=bool(body.get("errors")), items=items)

    @property
    def ids(self) -> list[str | None]:
        return [item.id for item in self.items]

    @property
    def failed(self) -> list[BulkItemResult]:
        return [item for item in self.items if not item.ok]


class GetResult(BaseModel):
    id: str
    found: bool
    source: Student | None = None

    @classmethod
    def from_response(cls, response: Any) -> "GetResult":
        body = response_body(response)
        found = bool(body.get("found"))
        source = Student.model_validate(body["_source"]) if found else None
        return cls(id=body["_id"], found=found, source=source)


class SearchHit(BaseModel):
    id: str
    # null when the request sorts on a field instead of relevance
    score: float | None = None
    source: Student
    sort: list[Any] | None = None


class SearchResult(BaseModel):
    total: int
    max_score: float | None = None
    hits: list[SearchHit]

    @classmethod
    def from_response(cls, response: Any) -> "SearchResult":
        body = response_body(response)
        hits_section = body["hits"]
        hits = [
            SearchHit(
                id=hit["_id"],
                score=hit.get("_score"),
                source=Student.model_validate(hit["_source"]),
                sort=hit.get("sort"),
            )
            for hit in hits_section["hits"]
        ]
        total = hits_section.get("total")
        total_val = total.get("value", len(hits)) if isinstance(total, dict) else len(hits)
        return cls(total=total_val, max_score=hits_section.get("max_score"), hits=hits)
