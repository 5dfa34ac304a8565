# Document and response schemas

from student_search.schemas.search import BulkItemResult, BulkResult, GetResult, SearchHit, SearchResult, WriteResult
from student_search.schemas.student import Course, Job, Student

__all__ = [
    "Student",
    "Course",
    "Job",
    "WriteResult",
    "BulkItemResult",
    "BulkResult",
    "GetResult",
    "SearchHit",
    "SearchResult",
]
