# storefront/api/deps.py
from functools import lru_cache

import redis
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.local_storage import LocalStorage, get_redis
from storefront.domain.errors import BackendError
from storefront.repos.base import CommerceStore
from storefront.repos.profile_repo import ProfileRepo
from storefront.repos.stores import get_store
from storefront.services.auth_client import AuthClient
from storefront.services.session_store import SessionStore


@lru_cache
def get_redis_client() -> redis.Redis:
    return get_redis()


def get_local_storage(
    x_device_id: str = Header(..., min_length=1),
    client: redis.Redis = Depends(get_redis_client),
) -> LocalStorage:
    return LocalStorage(client, x_device_id)


def get_auth_client(authorization: str | None = Header(None)) -> AuthClient:
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip() or None
    return AuthClient(access_token=token)


def get_session(
    storage: LocalStorage = Depends(get_local_storage),
    auth_client: AuthClient = Depends(get_auth_client),
    db: Session = Depends(get_db),
):
    session = SessionStore(storage, auth_client, ProfileRepo(db))
    try:
        session.initialize()
    except BackendError as e:
        raise HTTPException(status_code=502, detail=str(e))
    try:
        yield session
    finally:
        session.close()


def redirect_to(path: str) -> HTTPException:
    return HTTPException(status_code=303, detail=f"Redirect to {path}", headers={"Location": path})


def require_user(session: SessionStore = Depends(get_session)) -> SessionStore:
    if not session.user:
        raise HTTPException(status_code=401, detail="Please sign in to continue")
    return session


def require_page_user(session: SessionStore = Depends(get_session)) -> SessionStore:
    """Signed-in pages that send anonymous visitors home instead of failing."""
    if not session.user:
        raise redirect_to("/")
    return session


def require_admin(session: SessionStore = Depends(get_session)) -> SessionStore:
    if not session.is_admin:
        raise redirect_to("/")
    return session


def store_for(session: SessionStore, db: Session, storage: LocalStorage) -> CommerceStore:
    return get_store(session.user_id, db, storage)
