# erp_console/services/users.py
"""
Users, roles and the console's own login session.

Login is two-step when the backend requires an OTP: /auth/login answers
{requireOTP: true, email} and /auth/verify-otp returns {user, tokens}.
Tokens are written to the SessionStore; the ErpClient reads them from there.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..cache import NEVER_STALE
from ..errors import DEFAULT_MESSAGE, ErpApiError
from ..session import SessionStore
from .base import ResourceService, dump

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Đăng nhập thất bại!"
OTP_FAILED = "Mã xác thực không đúng!"


class UserService(ResourceService):
    path = "/users"
    key = "users"
    label = "người dùng"


class RoleService(ResourceService):
    path = "/roles"
    key = "roles"
    label = "vai trò"


class AuthService(ResourceService):
    path = "/auth"
    key = "auth"
    label = "phiên đăng nhập"

    def __init__(self, client, cache, session: SessionStore):
        super().__init__(client, cache)
        self.session = session

    def me_key(self):
        return (self.key, "me")

    def _store(self, data: Optional[Dict[str, Any]]) -> bool:
        if not isinstance(data, dict):
            return False
        tokens = data.get("tokens") if isinstance(data.get("tokens"), dict) else data
        if not tokens.get("accessToken"):
            return False
        if data.get("csrfToken") and "csrfToken" not in tokens:
            tokens = {**tokens, "csrfToken": data["csrfToken"]}
        user = data.get("user")
        self.session.save(tokens, user=user)
        if user is not None:
            self.cache.set(self.me_key(), {"success": True, "data": user})
        logger.info("Logged in as %s", (user or {}).get("email", "?"))
        return True

    def login(self, payload: Any) -> Dict[str, Any]:
        try:
            body = self.client.post(f"{self.path}/login", dump(payload))
        except ErpApiError as e:
            if e.message == DEFAULT_MESSAGE:
                e.message = LOGIN_FAILED
            raise
        data = body.get("data") or {}
        if data.get("requireOTP"):
            body.setdefault("message", "Vui lòng nhập mã xác thực đã gửi đến email của bạn")
        elif self._store(data):
            body["message"] = "Đăng nhập thành công!"
        return body

    def verify_otp(self, payload: Any) -> Dict[str, Any]:
        try:
            body = self.client.post(f"{self.path}/verify-otp", dump(payload))
        except ErpApiError as e:
            if e.message == DEFAULT_MESSAGE:
                e.message = OTP_FAILED
            raise
        if not self._store(body.get("data")):
            raise ErpApiError(401, OTP_FAILED)
        body["message"] = "Xác thực thành công!"
        return body

    def resend_otp(self, payload: Any) -> Dict[str, Any]:
        body = self.client.post(f"{self.path}/resend-otp", dump(payload))
        body["message"] = "Mã xác thực mới đã được gửi đến email của bạn!"
        return body

    def logout(self) -> Dict[str, Any]:
        """Always ends the local session, even when the backend call fails."""
        try:
            if self.session.is_authenticated:
                self.client.post(f"{self.path}/logout")
        except ErpApiError as e:
            logger.warning("Backend logout failed (%s); clearing local session anyway", e.message)
        finally:
            self.session.clear()
            self.cache.clear()
        return {"success": True, "data": None, "message": "Đăng xuất thành công!"}

    def me(self) -> Dict[str, Any]:
        body = self._query(self.me_key(), f"{self.path}/me", stale_time=NEVER_STALE)
        if isinstance(body.get("data"), dict) and body["data"] != self.session.user:
            self.session.save({}, user=body["data"])
        return body

    def change_password(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/change-password", payload, message="Đổi mật khẩu thành công!")

    def forgot_password(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/forgot-password", payload,
                            message="Email khôi phục mật khẩu đã được gửi!")

    def reset_password(self, payload: Any) -> Dict[str, Any]:
        return self._mutate("POST", f"{self.path}/reset-password", payload,
                            message="Đặt lại mật khẩu thành công!")
