"""Action events: the classified tuples the host submits."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EventKind(StrEnum):
    ATTEMPT = "attempt"
    TOOL_CALL = "toolCall"
    PROGRESS_MARKER = "progressMarker"


class Outcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class ActionEvent(BaseModel):
    """One observed unit of work against a sub-problem.

    ``timestamp`` orders events within a sub-problem; it is never compared
    against the wall clock. ``raw_message`` is kept verbatim.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    subproblem_id: str = Field(min_length=1)
    component: str = ""
    kind: EventKind
    outcome: Outcome
    raw_message: Optional[str] = None
    timestamp: int = Field(ge=0)
    service_failure: bool = False  # service/availability failure tag

    @field_validator("subproblem_id", mode="before")
    @classmethod
    def _strip_subproblem_id(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @property
    def is_failure(self) -> bool:
        return self.outcome is Outcome.FAILURE
