# erp_console/routers/auth.py
"""
Login session, users and roles.

The console holds one operator session (see SessionStore); /auth/session shows
whether it is active without calling the backend.
"""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..constants import ROLE_LABELS, label
from ..deps import Console, get_console, query_params
from ..models import (
    ChangePasswordIn,
    ForgotPasswordIn,
    LoginIn,
    ResendOtpIn,
    ResetPasswordIn,
    RoleIn,
    RoleUpdate,
    UserIn,
    UserUpdate,
    VerifyOtpIn,
)

router = APIRouter(tags=["auth"])


# -----------------------------------------------------------------------------
# Auth
# -----------------------------------------------------------------------------
@router.post("/auth/login")
def login(payload: LoginIn, console: Console = Depends(get_console)):
    return console.auth.login(payload)


@router.post("/auth/verify-otp")
def verify_otp(payload: VerifyOtpIn, console: Console = Depends(get_console)):
    return console.auth.verify_otp(payload)


@router.post("/auth/resend-otp")
def resend_otp(payload: ResendOtpIn, console: Console = Depends(get_console)):
    return console.auth.resend_otp(payload)


@router.post("/auth/logout")
def logout(console: Console = Depends(get_console)):
    return console.auth.logout()


@router.get("/auth/me")
def me(console: Console = Depends(get_console)):
    return console.auth.me()


@router.get("/auth/session")
def session_state(console: Console = Depends(get_console)):
    user = console.session.user or {}
    return {
        "success": True,
        "data": {
            "isAuthenticated": console.session.is_authenticated,
            "user": user or None,
            "roleLabel": label(ROLE_LABELS, (user.get("role") or {}).get("roleKey")) if user else None,
        },
    }


@router.post("/auth/change-password")
def change_password(payload: ChangePasswordIn, console: Console = Depends(get_console)):
    return console.auth.change_password(payload)


@router.post("/auth/forgot-password")
def forgot_password(payload: ForgotPasswordIn, console: Console = Depends(get_console)):
    return console.auth.forgot_password(payload)


@router.post("/auth/reset-password")
def reset_password(payload: ResetPasswordIn, console: Console = Depends(get_console)):
    return console.auth.reset_password(payload)


# -----------------------------------------------------------------------------
# Users & roles
# -----------------------------------------------------------------------------
@router.get("/users")
def list_users(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.users.list(params)


@router.get("/users/{id}")
def get_user(id: int, console: Console = Depends(get_console)):
    return console.users.get(id)


@router.post("/users")
def create_user(payload: UserIn, console: Console = Depends(get_console)):
    return console.users.create(payload)


@router.put("/users/{id}")
def update_user(id: int, payload: UserUpdate, console: Console = Depends(get_console)):
    return console.users.update(id, payload)


@router.delete("/users/{id}")
def delete_user(id: int, console: Console = Depends(get_console)):
    return console.users.delete(id)


@router.get("/roles")
def list_roles(params: Dict[str, Any] = Depends(query_params), console: Console = Depends(get_console)):
    return console.roles.list(params)


@router.get("/roles/{id}")
def get_role(id: int, console: Console = Depends(get_console)):
    return console.roles.get(id)


@router.post("/roles")
def create_role(payload: RoleIn, console: Console = Depends(get_console)):
    return console.roles.create(payload)


@router.put("/roles/{id}")
def update_role(id: int, payload: RoleUpdate, console: Console = Depends(get_console)):
    return console.roles.update(id, payload)


@router.delete("/roles/{id}")
def delete_role(id: int, console: Console = Depends(get_console)):
    return console.roles.delete(id)
