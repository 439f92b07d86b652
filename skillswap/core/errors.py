"""Domain error taxonomy.

Services raise these directly; each one is an ``HTTPException`` carrying the
status code its category maps to, so routers never translate them by hand.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class SkillSwapError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail)


class ValidationError(SkillSwapError):
    """Malformed or inconsistent input."""

    status_code = status.HTTP_400_BAD_REQUEST


class PolicyError(SkillSwapError):
    """The target refuses the operation (e.g. a private profile)."""

    status_code = status.HTTP_400_BAD_REQUEST


class StateError(SkillSwapError):
    """The operation is not valid for the entity's current lifecycle state."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthorizationError(SkillSwapError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SkillSwapError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SkillSwapError):
    """A uniqueness invariant would be violated."""

    status_code = status.HTTP_409_CONFLICT
