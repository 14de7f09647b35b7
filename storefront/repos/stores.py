# storefront/repos/stores.py
from sqlalchemy.orm import Session

from storefront.data.local_storage import LocalStorage
from storefront.repos.base import CommerceStore
from storefront.repos.local_store import LocalStore
from storefront.repos.remote_store import RemoteStore
from storefront.utils.settings import DEMO_USER_ID


def is_demo_user(user_id: str | None) -> bool:
    return user_id == DEMO_USER_ID


def get_store(user_id: str, db: Session, storage: LocalStorage) -> CommerceStore:
    # an identity's data lives in exactly one of the two, there is no migration
    if is_demo_user(user_id):
        return LocalStore(storage, user_id)
    return RemoteStore(db, user_id)
