"""Pydantic schemas for the pastoral members module."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from pastoral.common.models import MemberStatus, User, UserRole
from pastoral.common.schemas import WriteRequest

# Role labels used by the web client's member form
ROLE_ALIASES = {
    "membro": UserRole.MEMBER,
    "voluntario": UserRole.MEMBER,
    "secretario": UserRole.SECRETARY,
    "financeiro": UserRole.FINANCE,
    "celebrante": UserRole.CELEBRANTE,
    "coordenador": UserRole.COORDENADOR,
    "vice_coordenador": UserRole.VICE_COORDENADOR,
}

DAY_MONTH_PATTERN = r"^\d{2}/\d{2}$"


def _coerce_role(value: Any) -> Any:
    if isinstance(value, str):
        alias = ROLE_ALIASES.get(value.strip().lower())
        if alias is not None:
            return alias
        return value.strip().upper()
    return value


class ChildInfo(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    birth: Optional[str] = None


class Sacraments(BaseModel):
    baptism: bool = False
    eucharist: bool = False
    confirmation: bool = False
    marriage: bool = False


class ProfileFields(WriteRequest):
    """Fields a member may edit on their own profile."""

    non_nullable = ("name", "has_children")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=40)
    birth_date: Optional[str] = Field(None, pattern=DAY_MONTH_PATTERN)
    address: Optional[str] = Field(None, max_length=500)
    marital_status: Optional[str] = Field(None, max_length=50)
    spouse_name: Optional[str] = Field(None, max_length=200)
    wedding_date: Optional[str] = Field(None, pattern=DAY_MONTH_PATTERN)
    has_children: Optional[bool] = None
    children: Optional[list[ChildInfo]] = None
    sacraments: Optional[Sacraments] = None
    photo_url: Optional[str] = Field(None, max_length=1000)


class ProfileUpdateRequest(ProfileFields):
    """Self-service profile edit (role and status are not editable here)."""


class MemberCreateRequest(ProfileFields):
    """Request to register a member manually (no identity provider account)."""

    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.MEMBER
    email: Optional[EmailStr] = None
    status: MemberStatus = MemberStatus.ATIVO

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return _coerce_role(value)


class MemberUpdateRequest(ProfileFields):
    """Request to update a member (staff)."""

    non_nullable = ProfileFields.non_nullable + ("role", "status")

    role: Optional[UserRole] = None
    email: Optional[EmailStr] = None
    status: Optional[MemberStatus] = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return _coerce_role(value)


class MemberResponse(BaseModel):
    """Response with member details."""

    id: str
    role: str
    name: str
    email: str
    phone: Optional[str]
    status: str
    birth_date: Optional[str]
    address: Optional[str]
    marital_status: Optional[str]
    spouse_name: Optional[str]
    wedding_date: Optional[str]
    has_children: bool
    children: list[dict[str, Any]]
    sacraments: dict[str, Any]
    photo_url: Optional[str]

    @classmethod
    def from_model(cls, user: User) -> "MemberResponse":
        return cls(
            id=user.id,
            role=user.role,
            name=user.name,
            email=user.email or "",
            phone=user.phone,
            status=user.status,
            birth_date=user.birth_date,
            address=user.address,
            marital_status=user.marital_status,
            spouse_name=user.spouse_name,
            wedding_date=user.wedding_date,
            has_children=bool(user.has_children),
            children=[c for c in user.children if isinstance(c, dict)],
            sacraments={**Sacraments().model_dump(), **user.sacrament_flags},
            photo_url=user.photo_url,
        )
