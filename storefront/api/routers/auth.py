# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_session
from storefront.domain.errors import AuthError, BackendError
from storefront.domain.schemas import (
    PhoneIn,
    SendOtpOut,
    VerifyOtpIn,
    VerifyOtpOut,
    CreateProfileIn,
    UserProfileOut,
    SessionOut,
)
from storefront.services.session_store import SessionStore
from storefront.services.sign_in_service import SignInService

router = APIRouter(prefix="/auth", tags=["auth"])


def session_out(session: SessionStore):
    return {"user_id": session.user_id, "is_demo": session.is_demo, "profile": session.profile}


@router.post("/otp", response_model=SendOtpOut)
def send_otp(payload: PhoneIn, session: SessionStore = Depends(get_session)):
    try:
        return SignInService(session).send_otp(payload.phone)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/verify", response_model=VerifyOtpOut)
def verify_otp(payload: VerifyOtpIn, session: SessionStore = Depends(get_session)):
    """
    Checks the one-time code. step == "create_profile" means the caller
    must POST /auth/profile before the identity is usable.
    """
    try:
        return SignInService(session).verify_otp(payload.phone, payload.otp)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/profile", response_model=UserProfileOut, status_code=201)
def create_profile(payload: CreateProfileIn, session: SessionStore = Depends(get_session)):
    try:
        return SignInService(session).create_profile(payload.phone, payload.full_name, payload.email)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/session", response_model=SessionOut)
def current_session(session: SessionStore = Depends(get_session)):
    return session_out(session)


@router.post("/sign-out", response_model=SessionOut)
def sign_out(session: SessionStore = Depends(get_session)):
    try:
        session.sign_out()
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return session_out(session)
