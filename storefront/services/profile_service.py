# storefront/services/profile_service.py
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.errors import BackendError
from storefront.services.session_store import SessionStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, session: SessionStore):
        self.session = session

    def update_profile(self, full_name: str, email: str | None) -> Dict[str, Any]:
        email = email or None

        if self.session.is_demo:
            updated = {**self.session.profile, "full_name": full_name, "email": email}
            self.session.mock_sign_in(updated)
            return updated

        try:
            row = self.session.profiles.update_profile(
                self.session.user_id,
                {"full_name": full_name, "email": email},
            )
        except SQLAlchemyError as e:
            self.session.profiles.rollback()
            logger.error(f"Error updating profile for {self.session.user_id}: {e}")
            raise BackendError("Failed to update profile. Please try again.") from e

        if not row:
            raise LookupError("Profile not found")

        self.session.refresh_profile()
        logger.info(f"Profile updated for {self.session.user_id}")
        return self.session.profile
