# event_planner/routes/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from event_planner.core.config import settings
from event_planner.core.database import get_db
from event_planner.core.rate_limit import limiter
from event_planner.schemas.auth import (
    ForgotPasswordIn,
    LoginIn,
    LoginOut,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    RegisterOut,
    ResendVerifyIn,
    ResetPasswordIn,
    TokenPairOut,
    VerifyEmailIn,
    VerifyEmailOut,
)
from event_planner.schemas.common import MessageOut
from event_planner.services import auth as auth_service
from event_planner.services.email_verification import resend_verification, verify_email
from event_planner.services.password_reset import RESET_PASSWORD_MESSAGE, request_password_reset, reset_password
from event_planner.services.users import register_user

router = APIRouter(prefix="/auth", tags=["auth"])

# Limits are always attached; limiter.enabled (ENABLE_RATE_LIMITING) switches them on.


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
def register(request: Request, payload: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(
        db,
        username=payload.username,
        email=str(payload.email),
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        timezone=payload.timezone,
    )
    return RegisterOut(
        message="Registration successful. Please check your email to verify your account.",
        user_id=user.id,
        username=user.username,
        email=user.email,
    )


@router.post("/verify-email", response_model=VerifyEmailOut)
def verify(payload: VerifyEmailIn, db: Session = Depends(get_db)):
    user = verify_email(db, payload.token)
    return VerifyEmailOut(
        message="Email verified successfully! You can now log in to your account.",
        user_id=user.id,
        username=user.username,
    )


@router.post("/resend-verification", response_model=MessageOut)
@limiter.limit(settings.PASSWORD_RESET_RATE_LIMIT)
def resend(request: Request, payload: ResendVerifyIn, db: Session = Depends(get_db)):
    return {"message": resend_verification(db, str(payload.email))}


@router.post("/login", response_model=LoginOut)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, payload: LoginIn, db: Session = Depends(get_db)):
    result = auth_service.login(db, payload.login, payload.password)
    user = result.user
    return LoginOut(
        token=result.access_token,
        refresh_token=result.refresh_token,
        user_id=user.id,
        username=user.username,
        email=user.email,
        timezone=user.timezone,
    )


@router.post("/refresh", response_model=TokenPairOut)
def refresh(payload: RefreshIn, db: Session = Depends(get_db)):
    """
    Rotate refresh tokens:
      - consume the presented token (single use)
      - issue a new access token and a new refresh token
    """
    pair = auth_service.refresh_session(db, payload.refresh_token)
    return TokenPairOut(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/logout", response_model=MessageOut)
def logout(payload: LogoutIn, db: Session = Depends(get_db)):
    """
    Revoke the presented refresh token. Unknown or already revoked tokens are
    accepted so repeated calls succeed.
    """
    auth_service.logout(db, payload.refresh_token)
    return {"message": "Logged out"}


@router.post("/forgot-password", response_model=MessageOut)
@limiter.limit(settings.PASSWORD_RESET_RATE_LIMIT)
def forgot_password(request: Request, payload: ForgotPasswordIn, db: Session = Depends(get_db)):
    return {"message": request_password_reset(db, str(payload.email))}


@router.post("/reset-password", response_model=MessageOut)
def reset(payload: ResetPasswordIn, db: Session = Depends(get_db)):
    reset_password(db, payload.token, payload.new_password)
    return {"message": RESET_PASSWORD_MESSAGE}
