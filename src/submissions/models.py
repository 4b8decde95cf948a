"""
Completed Assessment Models

Read-side view of a completed assessment document, and the shapes this
package writes back onto it.

The submission document is owned by the form client; the notifier only
reads it, so parsing is lenient: missing, null or malformed totals fall
back to 0 rather than failing the invocation.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_USER = "unknown-user"

Number = Union[int, float]


class NotificationState(str, Enum):
    """Value of ``notification.status`` on a submission."""
    SENT = "sent"


def _coerce_number(value: Any) -> Number:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return 0
    return 0


class SubmissionTotals(BaseModel):
    """Progress totals recorded by the form at submission time."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    answered: Number = 0
    questions: Number = 0
    completion_percent: Number = Field(default=0, alias="completionPercent")

    @field_validator("answered", "questions", "completion_percent", mode="before")
    @classmethod
    def _default_to_zero(cls, value: Any) -> Number:
        return _coerce_number(value)


class SubmissionRecord(BaseModel):
    """A completed assessment as stored by the form client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    submission_id: Optional[str] = Field(default=None, alias="submissionId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    totals: SubmissionTotals = Field(default_factory=SubmissionTotals)
    responses: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("submission_id", "user_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value)
        return text if text else None

    @field_validator("totals", mode="before")
    @classmethod
    def _totals_mapping(cls, value: Any) -> Any:
        if isinstance(value, SubmissionTotals):
            return value
        return value if isinstance(value, Mapping) else {}

    @field_validator("responses", mode="before")
    @classmethod
    def _responses_mapping(cls, value: Any) -> Any:
        return dict(value) if isinstance(value, Mapping) else {}

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "SubmissionRecord":
        """Parse a raw document snapshot."""
        return cls.model_validate(dict(data))

    @property
    def display_user_id(self) -> str:
        return self.user_id or UNKNOWN_USER


class NotificationRecord(BaseModel):
    """The ``notification`` sub-object merged onto a submission after a send."""

    model_config = ConfigDict(populate_by_name=True)

    reviewer_emails: List[str] = Field(alias="reviewerEmails")
    notified_at: Any = Field(alias="notifiedAt")
    last_event_id: str = Field(alias="lastEventId")
    status: NotificationState = NotificationState.SENT

    def to_document(self) -> Dict[str, Any]:
        return {
            "reviewerEmails": list(self.reviewer_emails),
            "notifiedAt": self.notified_at,
            "lastEventId": self.last_event_id,
            "status": self.status.value,
        }
