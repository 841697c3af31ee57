"""Submission models."""

import enum
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ergtracking.auth.models import Identity


class SubmissionKind(str, enum.Enum):
    """Forms that can be submitted."""

    APPLICATION = "application"
    CHECKIN = "checkin"
    TRAINING = "training"
    PROMOTION = "promotion"

    @property
    def title(self) -> str:
        """Notification title without the brand prefix."""
        return _TITLES[self]


_TITLES = {
    SubmissionKind.APPLICATION: "Application",
    SubmissionKind.CHECKIN: "Weekly Check\u2011In",
    SubmissionKind.TRAINING: "Training Update",
    SubmissionKind.PROMOTION: "Promotion Request",
}


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class Submission(BaseModel):
    """One recorded form event."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    when: int = Field(default_factory=now_ms)
    kind: SubmissionKind = Field(alias="type")
    user: Identity
    data: Any = Field(default_factory=dict)
