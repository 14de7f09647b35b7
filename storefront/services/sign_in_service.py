# storefront/services/sign_in_service.py
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError

from storefront.data.models.user_profile import UserProfileModel
from storefront.domain.errors import AuthError, BackendError
from storefront.repos.profile_repo import profile_dict
from storefront.services.session_store import SessionStore, MOCK_PROFILE_KEY
from storefront.utils.settings import (
    DEMO_PHONE,
    DEMO_OTP,
    DEMO_USER_ID,
    DEMO_FULL_NAME,
    DEMO_VERIFY_TTL_SECONDS,
    PHONE_COUNTRY_CODE,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# set once the demo code is verified, profile creation needs it
DEMO_VERIFIED_KEY = "demoOtpVerified"


def format_phone(phone: str) -> str:
    return phone if phone.startswith(PHONE_COUNTRY_CODE) else f"{PHONE_COUNTRY_CODE}{phone}"


def is_demo_phone(phone: str) -> bool:
    return phone == DEMO_PHONE


class SignInService:
    """
    Phone/OTP sign in: send code -> verify code -> (create profile).
    The demo phone number never reaches the auth provider.
    """

    def __init__(self, session: SessionStore):
        self.session = session
        self.auth_client = session.auth_client
        self.profiles = session.profiles

    def send_otp(self, phone: str) -> Dict[str, Any]:
        if is_demo_phone(phone):
            logger.info("Demo phone number, skipping OTP delivery")
            return {"phone": phone, "is_demo": True}

        self.auth_client.send_otp(format_phone(phone))
        logger.info(f"OTP sent to {format_phone(phone)}")
        return {"phone": phone, "is_demo": False}

    def verify_otp(self, phone: str, otp: str) -> Dict[str, Any]:
        if is_demo_phone(phone):
            return self._verify_demo(otp)

        auth_session = self.auth_client.verify_otp(format_phone(phone), otp)

        try:
            row = self.profiles.get_profile(auth_session.user.id)
        except SQLAlchemyError as e:
            self.profiles.rollback()
            logger.error(f"Profile lookup for {auth_session.user.id} failed: {e}")
            raise BackendError("Failed to load profile") from e

        if not row:
            return {
                "step": "create_profile",
                "is_demo": False,
                "access_token": auth_session.access_token,
            }

        return {
            "step": "signed_in",
            "is_demo": False,
            "access_token": auth_session.access_token,
            "profile": profile_dict(row),
        }

    def _verify_demo(self, otp: str) -> Dict[str, Any]:
        if otp != DEMO_OTP:
            raise AuthError(f"Invalid OTP. For demo, use: {DEMO_OTP}")

        saved = self.session.storage.get_json(MOCK_PROFILE_KEY)
        if saved:
            self.session.mock_sign_in(saved)
            return {"step": "signed_in", "is_demo": True, "profile": saved}

        self.session.storage.set_item(DEMO_VERIFIED_KEY, "1", ttl_seconds=DEMO_VERIFY_TTL_SECONDS)
        return {"step": "create_profile", "is_demo": True, "suggested_name": DEMO_FULL_NAME}

    def create_profile(self, phone: str, full_name: str, email: str | None) -> Dict[str, Any]:
        email = email or None

        if is_demo_phone(phone):
            if not self.session.storage.get_item(DEMO_VERIFIED_KEY):
                raise AuthError("Please verify the OTP first")
            profile = {
                "id": DEMO_USER_ID,
                "phone_number": format_phone(phone),
                "full_name": full_name,
                "email": email,
                "default_address": None,
                "is_admin": True,  # the demo identity gets the back office
            }
            self.session.mock_sign_in(profile)
            self.session.storage.remove_item(DEMO_VERIFIED_KEY)
            return profile

        # the provider user resolved for this client's token
        if not self.session.user or self.session.is_demo:
            raise AuthError("No user found")
        user_id = self.session.user_id

        try:
            row = self.profiles.create_profile(
                UserProfileModel(
                    id=user_id,
                    phone_number=format_phone(phone),
                    full_name=full_name,
                    email=email,
                    is_admin=False,
                )
            )
        except SQLAlchemyError as e:
            self.profiles.rollback()
            logger.error(f"Failed to create profile for {user_id}: {e}")
            raise BackendError("Failed to create profile") from e

        self.session.refresh_profile()
        logger.info(f"Profile created for user {user_id}")
        return profile_dict(row)
