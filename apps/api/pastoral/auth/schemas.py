from __future__ import annotations

from pydantic import BaseModel

from pastoral.members.schemas import MemberResponse, ProfileUpdateRequest


class CurrentUserResponse(MemberResponse):
    """The signed-in member, as returned by /auth/me and /auth/sync."""


class SuccessResponse(BaseModel):
    success: bool = True


__all__ = ["CurrentUserResponse", "ProfileUpdateRequest", "SuccessResponse"]
