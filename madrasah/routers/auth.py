"""
Auth router — sign-in, sign-up, sign-out and the current user.

Supabase mode: each call uses a fresh anon-key client, so the shared service
client never picks up an end-user session. The access token returned by
sign-in is what the frontend sends back as `Authorization: Bearer <token>`.

Mock mode: sign-in with a demo user's email returns its mock token.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from madrasah.core.context import AppContext, get_context
from madrasah.core.errors import MESSAGES, STATUS_CODES, ErrorKind, classify_error
from madrasah.core.security import MOCK_USERS, get_current_user, security_scheme
from madrasah.schemas.auth import CurrentUser, SignIn, SignUp
from madrasah.utils.response import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _auth_failed(ctx: AppContext, exc: Exception, fallback: ErrorKind) -> HTTPException:
    kind = classify_error(exc)
    if kind == ErrorKind.UNKNOWN:
        kind = fallback
    logger.info("Auth call failed (%s): %s", kind.value, exc)
    return HTTPException(status_code=STATUS_CODES[kind], detail=MESSAGES[ctx.settings.ERROR_LOCALE][kind])


def _session_payload(response) -> dict:
    session = response.session
    user = response.user
    return {
        "access_token": session.access_token if session else None,
        "refresh_token": session.refresh_token if session else None,
        "user": {"id": user.id, "email": user.email} if user else None,
    }


@router.post("/sign-in")
async def sign_in(body: SignIn, ctx: AppContext = Depends(get_context)):
    if ctx.settings.AUTH_MODE == "mock":
        for token, user in MOCK_USERS.items():
            if user.email == body.email:
                return success_response(
                    data={"access_token": token, "refresh_token": None, "user": user.model_dump()},
                    message="Login successful",
                )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MESSAGES[ctx.settings.ERROR_LOCALE][ErrorKind.UNAUTHENTICATED],
        )

    client = ctx.new_auth_client()
    try:
        response = client.auth.sign_in_with_password({"email": body.email, "password": body.password})
    except Exception as exc:
        raise _auth_failed(ctx, exc, ErrorKind.UNAUTHENTICATED)
    return success_response(data=_session_payload(response), message="Login successful")


@router.post("/sign-up")
async def sign_up(body: SignUp, ctx: AppContext = Depends(get_context)):
    if ctx.settings.AUTH_MODE == "mock":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sign-up is disabled in mock mode")

    client = ctx.new_auth_client()
    try:
        response = client.auth.sign_up({
            "email": body.email,
            "password": body.password,
            "options": {"data": {"full_name": body.full_name}},
        })
    except Exception as exc:
        raise _auth_failed(ctx, exc, ErrorKind.INVALID)
    return success_response(data=_session_payload(response), message="Account created")


@router.post("/sign-out")
async def sign_out(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    user: CurrentUser = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    """Revokes the session server-side in Supabase mode; mock tokens simply stop being sent."""
    if ctx.settings.AUTH_MODE != "mock":
        try:
            ctx.db.auth.admin.sign_out(credentials.credentials)
        except Exception as exc:
            logger.warning("Sign-out for %s failed: %s", user.user_id, exc)
    return success_response(message="Signed out")


@router.get("/me")
async def get_me(user: CurrentUser = Depends(get_current_user)):
    return success_response(data=user.model_dump())
