# storefront/services/auth_client.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

import requests
from requests import RequestException

from storefront.domain.errors import AuthError
from storefront.utils.retry import http_retry
from storefront.utils.settings import AUTH_SERVICE_URL, AUTH_API_KEY, AUTH_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthUser:
    id: str
    phone: str = ""
    email: str | None = None


@dataclass
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: str | None = None


@dataclass
class Subscription:
    _listeners: List[Callable] = field(repr=False)
    callback: Callable

    def unsubscribe(self):
        if self.callback in self._listeners:
            self._listeners.remove(self.callback)


def _user_from(data: Dict[str, Any]) -> AuthUser:
    return AuthUser(id=data["id"], phone=data.get("phone") or "", email=data.get("email"))


def _error_message(resp: requests.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    return body.get("msg") or body.get("error_description") or body.get("message") or fallback


class AuthClient:
    """
    Phone/OTP client for the hosted auth API (GoTrue style /auth/v1).
    One instance per client request, it carries that client's access token.
    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: int = AUTH_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or AUTH_SERVICE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else AUTH_API_KEY
        self.timeout = timeout
        self.access_token = access_token
        self._listeners: List[Callable[[str, AuthSession | None], None]] = []

    def _headers(self, with_token: bool = False) -> Dict[str, str]:
        headers = {"apikey": self.api_key}
        if with_token and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    @http_retry()
    def _post(self, path: str, payload: Dict[str, Any] | None = None, with_token: bool = False):
        url = f"{self.base_url}/auth/v1/{path}"
        logger.info(f"AuthClient POST {url}")
        return requests.post(url, json=payload or {}, headers=self._headers(with_token), timeout=self.timeout)

    @http_retry()
    def _get(self, path: str):
        url = f"{self.base_url}/auth/v1/{path}"
        logger.info(f"AuthClient GET {url}")
        return requests.get(url, headers=self._headers(with_token=True), timeout=self.timeout)

    # notifications
    def on_auth_state_change(self, callback: Callable[[str, AuthSession | None], None]) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def _notify(self, event: str, session: AuthSession | None):
        for callback in list(self._listeners):
            callback(event, session)

    # provider calls
    def send_otp(self, phone: str) -> None:
        try:
            resp = self._post("otp", {"phone": phone})
        except RequestException as e:
            raise AuthError("Failed to send OTP") from e
        if not resp.ok:
            raise AuthError(_error_message(resp, "Failed to send OTP"))

    def verify_otp(self, phone: str, token: str) -> AuthSession:
        try:
            resp = self._post("verify", {"type": "sms", "phone": phone, "token": token})
        except RequestException as e:
            raise AuthError("Invalid OTP") from e
        if not resp.ok:
            raise AuthError(_error_message(resp, "Invalid OTP"))

        body = resp.json()
        session = AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            user=_user_from(body["user"]),
        )
        self.access_token = session.access_token
        self._notify(SIGNED_IN, session)
        return session

    def get_user(self) -> AuthUser | None:
        if not self.access_token:
            return None
        resp = self._get("user")
        if resp.status_code in (401, 403):
            return None
        resp.raise_for_status()
        return _user_from(resp.json())

    def get_session(self) -> AuthSession | None:
        """Current session for the carried token, or None when it is missing or expired."""
        try:
            user = self.get_user()
        except RequestException as e:
            logger.error(f"Session lookup failed: {e}")
            return None
        if not user:
            return None
        return AuthSession(access_token=self.access_token, user=user)

    def sign_out(self) -> None:
        if self.access_token:
            try:
                self._post("logout", with_token=True)
            except RequestException as e:
                logger.warning(f"Remote sign out failed: {e}")
        self.access_token = None
        self._notify(SIGNED_OUT, None)
