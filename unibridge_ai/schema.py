"""Data models shared by the AI capabilities and the HTTP layer."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OpportunityType = Literal["scholarship", "bursary", "gig", "internship", "grant"]


class _Model(BaseModel):
    """Base model reading and writing camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class StudentProfile(_Model):
    """Feature bag describing a student for opportunity matching."""

    university: Optional[str] = None
    department: Optional[str] = None
    level: Optional[str] = None
    gpa: Optional[float] = None
    location: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)


class Opportunity(_Model):
    id: str
    title: str
    type: OpportunityType
    organization: str
    description: str
    amount: Optional[float] = None
    currency: Optional[str] = None
    deadline: str
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    location: str
    is_remote: bool = False
    application_url: str
    match_score: Optional[float] = None
    tags: List[str] = Field(default_factory=list)
    created_at: str


class MatchResult(_Model):
    opportunity: Opportunity
    score: float
    reason: str


class SummaryResult(_Model):
    summary: str
    model: str
    used_fallback: bool


class TranslationResult(_Model):
    translation: str
    model: str
    used_fallback: bool


class ModerationResult(_Model):
    flagged: bool
    score: float
    categories: List[str]
    recommendation: str
    model: str
    used_fallback: bool


class CheckinResult(_Model):
    urgent: bool
    response: str
    follow_ups: List[str]
    model: str
    used_fallback: bool
