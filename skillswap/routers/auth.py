from __future__ import annotations

from datetime import datetime
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from skillswap.core.db import get_session
from skillswap.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from skillswap.models.user import User, UserRole
from skillswap.schemas.auth import LoginRequest, SignupRequest, TokenResponse, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])
bearer = HTTPBearer()
logger = structlog.get_logger("skillswap.auth")

SessionDep = Annotated[Session, Depends(get_session)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials, Depends(bearer)]


def ensure_account_usable(session: Session, user: User) -> None:
    """Reject banned or deactivated accounts; lift temporary bans that ran out."""
    if user.is_banned():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is banned",
        )
    if user.banned_at is not None:
        user.banned_at = None
        user.banned_until = None
        user.banned_reason = None
        user.is_active = True
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("ban_expired", user_id=user.id)
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )


def get_current_user(creds: CredentialsDep, session: SessionDep) -> User:
    try:
        payload = decode_token(creds.credentials)
    except Exception as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from err

    email = payload.get("sub")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    statement = select(User).where(User.email == email)
    user = session.exec(statement).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    ensure_account_usable(session, user)
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_user_id(user: User) -> int:
    if user.id is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="authenticated user missing identifier",
        )
    return user.id


def require_admin(current: CurrentUserDep) -> User:
    if not current.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current


def require_super_admin(current: CurrentUserDep) -> User:
    if current.role != UserRole.SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required",
        )
    return current


AdminDep = Annotated[User, Depends(require_admin)]
SuperAdminDep = Annotated[User, Depends(require_super_admin)]


@router.post("/signup", response_model=TokenResponse)
def signup(payload: SignupRequest, session: SessionDep) -> TokenResponse:
    statement = select(User).where(User.email == payload.email)
    exists = session.exec(statement).first()
    if exists:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name.strip(),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as err:
        session.rollback()
        raise HTTPException(status_code=409, detail="Email already registered") from err
    session.refresh(user)
    logger.info("user_signed_up", user_id=user.id)
    return TokenResponse(access_token=create_access_token(sub=user.email))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, session: SessionDep) -> TokenResponse:
    statement = select(User).where(User.email == payload.email)
    user = session.exec(statement).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    ensure_account_usable(session, user)

    user.last_login_at = datetime.utcnow()
    session.add(user)
    session.commit()
    logger.info("user_logged_in", user_id=user.id)
    return TokenResponse(access_token=create_access_token(sub=user.email))


@router.get("/me", response_model=UserRead)
def me(current: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(current)
