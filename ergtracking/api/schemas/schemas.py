"""Pydantic schemas for API responses."""

from pydantic import BaseModel

from ergtracking.storage.models import Submission


class OkResponse(BaseModel):
    """Acknowledgement response."""

    ok: bool = True


class SubmissionRows(BaseModel):
    """Recent submissions, most recent first."""

    rows: list[Submission]
