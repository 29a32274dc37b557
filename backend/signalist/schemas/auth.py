from __future__ import annotations

from pydantic import BaseModel


class SignInFormData(BaseModel):
    email: str
    password: str


class SignUpFormData(BaseModel):
    full_name: str
    email: str
    password: str
    country: str
    investment_goals: str
    risk_tolerance: str
    preferred_industry: str


class AuthResult(BaseModel):
    success: bool
    error: str | None = None
