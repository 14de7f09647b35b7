# storefront/services/session_store.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from storefront.data.local_storage import LocalStorage
from storefront.repos.profile_repo import ProfileRepo, profile_dict
from storefront.repos.stores import is_demo_user
from storefront.services.auth_client import AuthClient, AuthSession, Subscription
from storefront.utils.settings import DEMO_USER_ID
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MOCK_USER_KEY = "mockUser"
MOCK_PROFILE_KEY = "mockUserProfile"


class SessionStore:
    """
    Who is signed in on this client, and their profile.

    initialize() resolves the identity: a stored demo bypass wins outright,
    otherwise the auth provider's session for the carried token is used.
    close() drops the provider subscription.
    """

    def __init__(self, storage: LocalStorage, auth_client: AuthClient, profiles: ProfileRepo):
        self.storage = storage
        self.auth_client = auth_client
        self.profiles = profiles

        self.user: Dict[str, Any] | None = None
        self.profile: Dict[str, Any] | None = None
        self.loading = True
        self._subscription: Subscription | None = None

    @property
    def user_id(self) -> str | None:
        return self.user["id"] if self.user else None

    @property
    def is_demo(self) -> bool:
        return is_demo_user(self.user_id)

    @property
    def is_admin(self) -> bool:
        return bool(self.profile and self.profile.get("is_admin"))

    def initialize(self) -> "SessionStore":
        saved_user = self.storage.get_json(MOCK_USER_KEY)
        saved_profile = self.storage.get_json(MOCK_PROFILE_KEY)

        if saved_user and saved_profile:
            self.user = saved_user
            self.profile = saved_profile
            self.loading = False
            return self

        session = self.auth_client.get_session()
        self._set_session(session)
        self.loading = False

        self._subscription = self.auth_client.on_auth_state_change(self._on_auth_change)
        return self

    def close(self):
        if self._subscription:
            self._subscription.unsubscribe()
            self._subscription = None

    def _set_session(self, session: AuthSession | None):
        if session:
            self.user = {"id": session.user.id, "phone": session.user.phone, "email": session.user.email}
            self.fetch_profile(session.user.id)
        else:
            self.user = None
            self.profile = None

    def _on_auth_change(self, event: str, session: AuthSession | None):
        # the demo bypass is never overridden by the provider
        if self.storage.get_json(MOCK_USER_KEY):
            return
        logger.info(f"Auth state change: {event}")
        self._set_session(session)

    def fetch_profile(self, user_id: str):
        if user_id == DEMO_USER_ID:
            saved = self.storage.get_json(MOCK_PROFILE_KEY)
            if saved:
                self.profile = saved
                return

        try:
            row = self.profiles.get_profile(user_id)
        except SQLAlchemyError as e:
            self.profiles.rollback()
            logger.error(f"Error fetching profile for {user_id}: {e}")
            return

        if row:
            self.profile = profile_dict(row)

    def refresh_profile(self):
        if self.user:
            self.fetch_profile(self.user["id"])

    def mock_sign_in(self, profile: Dict[str, Any]):
        user = {
            "id": DEMO_USER_ID,
            "email": profile.get("email"),
            "phone": profile.get("phone_number"),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.storage.set_json(MOCK_USER_KEY, user)
        self.storage.set_json(MOCK_PROFILE_KEY, profile)

        self.user = user
        self.profile = profile
        logger.info(f"Demo identity signed in as {profile.get('full_name')}")

    def sign_out(self):
        self.storage.remove_item(MOCK_USER_KEY)
        self.storage.remove_item(MOCK_PROFILE_KEY)
        self.auth_client.sign_out()
        self.user = None
        self.profile = None
