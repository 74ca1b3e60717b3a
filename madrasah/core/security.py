"""
Security module — Supabase access-token verification + mock auth.

Auth Flow:
1. User signs in through Supabase auth → gets an access token (JWT)
2. Frontend sends the token as a Bearer header
3. Backend verifies it with `auth.get_user(token)`
4. Backend reads the user's role from `user_roles` (default: "user")
5. Request proceeds with user_id available for `created_by`

Roles are reported, not enforced here: row access is governed by the
database's own policies.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from madrasah.core.context import AppContext, get_context
from madrasah.core.enums import AppRole
from madrasah.core.errors import ErrorKind, MESSAGES
from madrasah.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

security_scheme = HTTPBearer(auto_error=False)

# ---------------------------------------------------------------------------
# Mock users (local work without a Supabase project)
# ---------------------------------------------------------------------------
MOCK_USERS = {
    "mock-admin": CurrentUser(
        user_id="00000000-0000-0000-0000-000000000001",
        email="admin@madrasah.local",
        role=AppRole.ADMIN.value,
        name="Admin",
    ),
    "mock-accountant": CurrentUser(
        user_id="00000000-0000-0000-0000-000000000002",
        email="accounts@madrasah.local",
        role=AppRole.ACCOUNTANT.value,
        name="Accountant",
    ),
    "mock-teacher": CurrentUser(
        user_id="00000000-0000-0000-0000-000000000003",
        email="teacher@madrasah.local",
        role=AppRole.TEACHER.value,
        name="Teacher",
    ),
}


def _unauthenticated(ctx: AppContext) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=MESSAGES[ctx.settings.ERROR_LOCALE][ErrorKind.UNAUTHENTICATED],
    )


def get_user_role(ctx: AppContext, user_id: str) -> str:
    result = (
        ctx.db.table("user_roles")
        .select("role")
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )
    if result and result.data:
        return result.data["role"]
    return AppRole.USER.value


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------
async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    ctx: AppContext = Depends(get_context),
) -> CurrentUser:
    if credentials is None:
        raise _unauthenticated(ctx)

    token = credentials.credentials

    if ctx.settings.AUTH_MODE == "mock":
        user = MOCK_USERS.get(token)
        if user is None:
            raise _unauthenticated(ctx)
        return user

    return _supabase_auth(ctx, token)


def _supabase_auth(ctx: AppContext, token: str) -> CurrentUser:
    try:
        response = ctx.db.auth.get_user(token)
    except Exception as exc:
        logger.info("Token rejected: %s", exc)
        raise _unauthenticated(ctx)

    if response is None or response.user is None:
        raise _unauthenticated(ctx)

    user = response.user
    metadata = getattr(user, "user_metadata", None) or {}
    return CurrentUser(
        user_id=user.id,
        email=user.email,
        role=get_user_role(ctx, user.id),
        name=metadata.get("full_name"),
    )
