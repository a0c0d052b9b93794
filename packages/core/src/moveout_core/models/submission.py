"""Submission, evidence and pinned-alternative records."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from moveout_core.models.budget import DerivedTotals, ReadinessFlags
from moveout_core.models.enums import PinCategory


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class EvidenceItem(BaseModel):
    """A piece of supporting evidence: a URL and/or attached files.

    Only the presence of a usable URL or file reference is ever checked;
    file contents are opaque to the engine.
    """
    id: str
    type: str
    url: Optional[str] = None
    file_ids: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def is_usable(self) -> bool:
        """True when the item has a non-blank URL or at least one file."""
        has_url = bool(self.url and self.url.strip())
        return has_url or len(self.file_ids) > 0


class PinnedChoice(BaseModel):
    """A frozen snapshot of one housing or transportation alternative."""
    id: str
    category: PinCategory
    label: str
    snapshot: dict[str, Any] = Field(default_factory=dict)
    evidence_ids: list[str] = Field(default_factory=list)
    pinned_at: datetime = Field(default_factory=_utc_now)


class StudentInfo(BaseModel):
    name: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    teacher: Optional[str] = None

    model_config = {"populate_by_name": True}


class Submission(BaseModel):
    """A student's worksheet: raw inputs plus everything derived from them."""

    id: str
    schema_version: str = "1.0.0"
    constants_version: str = ""
    student: StudentInfo = Field(default_factory=StudentInfo)
    inputs: dict[str, Any] = Field(default_factory=dict)
    reflections: dict[str, Any] = Field(default_factory=dict)
    derived: DerivedTotals
    flags: ReadinessFlags = Field(default_factory=ReadinessFlags)
    pinned: list[PinnedChoice] = Field(default_factory=list)
    evidence_refs: dict[str, list[str]] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=_utc_now)
