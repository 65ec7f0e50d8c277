"""Exception hierarchy for the clustering core and lesson hosts."""

from __future__ import annotations

from typing import List, Optional


class ClusterStudyError(Exception):
    """Base class for all clusterstudy errors."""
    pass


class InvalidParameterError(ClusterStudyError, ValueError):
    """A parameter or input is outside the domain an operation accepts."""
    pass


class IncompleteAssignmentError(ClusterStudyError):
    """Validation was requested before every point received a colour.

    Attributes:
        missing_ids: Ids of the points that are still uncoloured
    """

    def __init__(self, missing_ids: List[int], message: Optional[str] = None):
        self.missing_ids = list(missing_ids)
        if message is None:
            message = (
                f"{len(self.missing_ids)} point(s) still need a colour: "
                f"{self.missing_ids}"
            )
        super().__init__(message)


class RunLimitError(ClusterStudyError):
    """Too many saved clustering runs for a single dataset."""

    def __init__(self, dataset: str, limit: int):
        self.dataset = dataset
        self.limit = limit
        super().__init__(
            f"At most {limit} runs can be saved for dataset '{dataset}'. "
            f"Delete a run before adding a new one."
        )
