from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class UserCreatedEvent(BaseModel):
    email: str
    name: str
    country: str | None = None
    investment_goals: str | None = None
    risk_tolerance: str | None = None
    preferred_industry: str | None = None


class EventRequest(BaseModel):
    name: str
    data: dict[str, Any] = Field(default_factory=dict)


class JobTrigger(BaseModel):
    event: str | None = None
    cron: str | None = None


class JobDefinition(BaseModel):
    id: str
    triggers: list[JobTrigger]


class EnqueuedJob(BaseModel):
    function_id: str
    job_id: str


class WelcomeEmailResult(BaseModel):
    success: bool
    message: str
    used_fallback: bool = False


class DigestRunResult(BaseModel):
    success: bool
    message: str
    processed: int = 0
    sent: int = 0
    failed: int = 0
