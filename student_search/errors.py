"""Project exceptions. Engine errors are re-raised as the elasticsearch client defines them."""


class StudentSearchError(Exception):
    """Base class for errors raised by this package."""


class FixtureLoadError(StudentSearchError):
    """The student fixture file is missing, unreadable or does not hold valid records."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"could not load students from {path}: {reason}")
