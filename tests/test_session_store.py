import pytest
from sqlalchemy.exc import OperationalError

from storefront.services.auth_client import AuthSession, SIGNED_IN
from storefront.services.session_store import SessionStore, MOCK_USER_KEY, MOCK_PROFILE_KEY
from storefront.utils.settings import DEMO_USER_ID

from conftest import StubAuthClient, CUSTOMER_ID, CUSTOMER_TOKEN

DEMO_PROFILE = {
    "id": DEMO_USER_ID,
    "phone_number": "+917268991581",
    "full_name": "abhishek",
    "email": None,
    "default_address": None,
    "is_admin": True,
}


def test_stored_bypass_wins_over_remote_session(storage, profiles):
    storage.set_json(MOCK_USER_KEY, {"id": DEMO_USER_ID})
    storage.set_json(MOCK_PROFILE_KEY, DEMO_PROFILE)
    auth = StubAuthClient(access_token=CUSTOMER_TOKEN)

    session = SessionStore(storage, auth, profiles).initialize()

    assert session.user_id == DEMO_USER_ID
    assert session.is_demo
    assert session.is_admin
    assert session.loading is False
    assert auth.session_lookups == 0


def test_remote_session_loads_profile(storage, profiles, customer_profile):
    session = SessionStore(storage, StubAuthClient(access_token=CUSTOMER_TOKEN), profiles).initialize()

    assert session.user_id == CUSTOMER_ID
    assert session.profile["full_name"] == "Meera Rao"
    assert not session.is_demo
    assert not session.is_admin


def test_no_token_means_no_identity(storage, profiles):
    session = SessionStore(storage, StubAuthClient(), profiles).initialize()
    assert session.user is None
    assert session.profile is None
    assert session.loading is False


def test_profile_fetch_failure_leaves_profile_unset(storage, profiles, monkeypatch):
    def fail(user_id):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(profiles, "get_profile", fail)
    session = SessionStore(storage, StubAuthClient(access_token=CUSTOMER_TOKEN), profiles).initialize()

    assert session.user_id == CUSTOMER_ID
    assert session.profile is None


def test_mock_sign_in_persists_both_keys(storage, profiles):
    session = SessionStore(storage, StubAuthClient(), profiles).initialize()
    session.mock_sign_in(DEMO_PROFILE)

    assert storage.get_json(MOCK_USER_KEY)["id"] == DEMO_USER_ID
    assert storage.get_json(MOCK_PROFILE_KEY) == DEMO_PROFILE

    again = SessionStore(storage, StubAuthClient(), profiles).initialize()
    assert again.profile == DEMO_PROFILE


def test_sign_out_clears_bypass_and_remote(storage, profiles):
    auth = StubAuthClient(access_token=CUSTOMER_TOKEN)
    session = SessionStore(storage, auth, profiles).initialize()
    session.mock_sign_in(DEMO_PROFILE)

    session.sign_out()

    assert storage.get_item(MOCK_USER_KEY) is None
    assert storage.get_item(MOCK_PROFILE_KEY) is None
    assert auth.access_token is None
    assert session.user is None and session.profile is None


def test_auth_change_updates_identity(storage, profiles, customer_profile):
    auth = StubAuthClient()
    session = SessionStore(storage, auth, profiles).initialize()
    assert session.user is None

    auth.verify_otp("+919876543210", "424242")

    assert session.user_id == CUSTOMER_ID
    assert session.profile["id"] == CUSTOMER_ID


def test_auth_change_ignored_while_bypass_stored(storage, profiles, customer_profile):
    auth = StubAuthClient()
    session = SessionStore(storage, auth, profiles).initialize()
    session.mock_sign_in(DEMO_PROFILE)

    auth.verify_otp("+919876543210", "424242")

    assert session.user_id == DEMO_USER_ID


def test_close_unsubscribes(storage, profiles, customer_profile):
    auth = StubAuthClient()
    session = SessionStore(storage, auth, profiles).initialize()
    session.close()

    auth._notify(SIGNED_IN, AuthSession(access_token=CUSTOMER_TOKEN, user=StubAuthClient.users[CUSTOMER_TOKEN]))
    assert session.user is None


def test_refresh_profile_picks_up_changes(storage, profiles, customer_profile, db):
    session = SessionStore(storage, StubAuthClient(access_token=CUSTOMER_TOKEN), profiles).initialize()
    customer_profile.full_name = "Meera R."
    db.commit()

    session.refresh_profile()
    assert session.profile["full_name"] == "Meera R."


def test_unreadable_bypass_falls_back_to_remote_session(storage, profiles, customer_profile):
    storage.set_item(MOCK_USER_KEY, "{not json")
    storage.set_json(MOCK_PROFILE_KEY, DEMO_PROFILE)

    session = SessionStore(storage, StubAuthClient(access_token=CUSTOMER_TOKEN), profiles).initialize()

    assert session.user_id == CUSTOMER_ID
    assert session.profile["full_name"] == "Meera Rao"
