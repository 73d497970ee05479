"""
Error taxonomy for Study Digits.

Load-time and configuration errors abort a run before any computation.
Degenerate clusters are not errors: k-means keeps the old center and logs it.
"""

from typing import Optional


class StudyDigitsError(Exception):
    """Base class for all errors raised by this package."""


class MalformedRecordError(StudyDigitsError, ValueError):
    """A record line does not parse into a label plus the expected vector."""

    def __init__(
        self,
        reason: str,
        path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.reason = reason
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}"
        if line_number is not None:
            location = f"{location}:{line_number}" if location else f"line {line_number}"
        message = f"Malformed record at {location}: {reason}" if location else f"Malformed record: {reason}"
        super().__init__(message)


class DimensionMismatchError(StudyDigitsError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(
            f"Cannot compare vectors of length {left} and {right}"
        )


class InvalidKError(StudyDigitsError, ValueError):
    """A neighbor or cluster count is outside the supported range."""


class UndefinedIndexError(StudyDigitsError, ZeroDivisionError):
    """A cluster quality index would divide by zero."""


class EmptySamplePartitionError(UndefinedIndexError):
    """The sampled points contain no within-cluster pair."""
