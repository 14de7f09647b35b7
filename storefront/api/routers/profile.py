# storefront/api/routers/profile.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import redirect_to, require_page_user
from storefront.domain.errors import BackendError
from storefront.domain.schemas import ProfileUpdateIn, UserProfileOut
from storefront.services.profile_service import ProfileService
from storefront.services.session_store import SessionStore

router = APIRouter(prefix="/profile", tags=["profile"])


def with_profile(session: SessionStore = Depends(require_page_user)) -> SessionStore:
    if not session.profile:
        raise redirect_to("/")
    return session


@router.get("", response_model=UserProfileOut)
def get_profile(session: SessionStore = Depends(with_profile)):
    return session.profile


@router.put("", response_model=UserProfileOut)
def update_profile(payload: ProfileUpdateIn, session: SessionStore = Depends(with_profile)):
    try:
        return ProfileService(session).update_profile(payload.full_name, payload.email)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
