import logging

from fastapi import APIRouter, Depends, HTTPException

from jeevraksha.config import FRONTEND_URL
from jeevraksha.database import fetch_row, get_db, insert_row, update_row, utc_now
from jeevraksha.dependencies import get_current_user
from jeevraksha.models.common import Role
from jeevraksha.models.profile import (
    AuthUser,
    ForgotPasswordRequest,
    LoginRequest,
    Profile,
    ProfileUpdate,
    RegisterRequest,
)
from jeevraksha.services.auth_client import AuthServiceError, HostedAuthClient, get_auth_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_http_error(e: AuthServiceError, default_status: int = 400) -> HTTPException:
    status = 503 if e.status_code >= 500 else default_status
    return HTTPException(status_code=status, detail=e.message)


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, auth_client: HostedAuthClient = Depends(get_auth_client)):
    """Create an account with the auth service and a matching local profile."""
    if body.role == Role.ADMIN:
        raise HTTPException(status_code=400, detail="Admin accounts cannot be self-registered")

    try:
        user = await auth_client.sign_up(
            body.email,
            body.password,
            metadata={"full_name": body.full_name, "phone": body.phone, "role": body.role.value},
        )
    except AuthServiceError as e:
        raise _auth_http_error(e) from None

    db = await get_db()
    try:
        await insert_row(db, "profiles", {
            "id": user["id"],
            "email": body.email,
            "full_name": body.full_name,
            "phone": body.phone,
            "role": body.role.value,
            "created_at": utc_now(),
        })
    except Exception:
        # Without a profile the user resolves as a citizen
        logger.exception("Profile creation failed for user %s", user["id"])

    return {
        "success": True,
        "message": "Registration successful! Please check your email to verify.",
        "user": user,
    }


@router.post("/login")
async def login(body: LoginRequest, auth_client: HostedAuthClient = Depends(get_auth_client)):
    try:
        session = await auth_client.sign_in(body.email, body.password)
    except AuthServiceError as e:
        raise _auth_http_error(e, default_status=401) from None

    user = session.get("user") or {}
    db = await get_db()
    profile = await fetch_row(db, "profiles", user.get("id", ""))
    return {
        "success": True,
        "message": "Login successful",
        "token": session.get("access_token"),
        "user": {**user, "profile": Profile.model_validate(profile) if profile else None},
    }


@router.post("/logout")
async def logout(
    user: AuthUser = Depends(get_current_user),
    auth_client: HostedAuthClient = Depends(get_auth_client),
):
    try:
        await auth_client.sign_out(user.token or "")
    except AuthServiceError as e:
        raise _auth_http_error(e) from None
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def me(user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    profile = await fetch_row(db, "profiles", user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {
        "success": True,
        "user": {"id": user.id, "email": user.email, "profile": Profile.model_validate(profile)},
    }


@router.put("/profile")
async def update_profile(body: ProfileUpdate, user: AuthUser = Depends(get_current_user)):
    db = await get_db()
    changes = body.model_dump(exclude_unset=True)
    changes["updated_at"] = utc_now()
    profile = await update_row(db, "profiles", user.id, changes)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"success": True, "message": "Profile updated", "profile": Profile.model_validate(profile)}


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest,
    auth_client: HostedAuthClient = Depends(get_auth_client),
):
    try:
        await auth_client.send_password_reset(body.email, redirect_to=f"{FRONTEND_URL}/reset-password")
    except AuthServiceError as e:
        raise _auth_http_error(e) from None
    return {"success": True, "message": "Password reset email sent"}
