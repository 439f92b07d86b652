from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from skillswap.core.db import get_session
from skillswap.models.report import ReportOut
from skillswap.routers.auth import CurrentUserDep, require_user_id
from skillswap.schemas.admin import ReportCreate
from skillswap.services.moderation_service import create_report

router = APIRouter(prefix="/reports", tags=["reports"])

SessionDep = Annotated[Session, Depends(get_session)]


@router.post("", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def file_report(
    payload: ReportCreate,
    current: CurrentUserDep,
    session: SessionDep,
) -> ReportOut:
    report = create_report(session, require_user_id(current), payload)
    return ReportOut.model_validate(report)
