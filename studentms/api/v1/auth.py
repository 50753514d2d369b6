"""Session auth routes and auth dependencies (get_current_user, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from studentms.core.database import get_db
from studentms.core.errors import AuthenticationError, AuthorizationError
from studentms.core.security import (
    TokenClaims,
    clear_session_cookie,
    create_access_token,
    decode_access_token,
    extract_token,
    set_session_cookie,
)
from studentms.models import Role, User
from studentms.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserSummary,
)
from studentms.schemas.base import MessageResponse
from studentms.services.accounts import authenticate, register_user
from studentms.services.user_stats import StatsCache

logger = logging.getLogger(__name__)

router = APIRouter()


def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: resolve the session token (cookie, then Bearer header) to a live user.

    The user row is re-read on every request, so deletions, bans and role changes
    apply without waiting for the token to expire.
    """
    claims = decode_access_token(extract_token(request))
    user = db.get(User, claims.sub)
    if user is None:
        raise AuthenticationError("User not found", code="USER_NOT_FOUND")
    if user.is_banned:
        raise AuthorizationError("Account has been banned", code="ACCOUNT_BANNED")
    current_user = CurrentUser.model_validate(user)
    request.state.user = current_user
    return current_user


def get_session_claims(request: Request) -> TokenClaims | None:
    """
    Dependency: claims of the presented session token without the live-user checks.

    Raises MissingTokenError when no token is presented. Returns None for an
    expired or otherwise unverifiable token so the cookie can still be cleared.
    """
    token = extract_token(request)
    try:
        return decode_access_token(token)
    except AuthenticationError:
        return None


def check_role(current_user: CurrentUser | None, allowed_roles: set[str]) -> CurrentUser:
    """Raise unless an authenticated user holds one of allowed_roles."""
    if current_user is None:
        raise AuthenticationError("Authentication required", code="AUTHENTICATION_REQUIRED")
    if current_user.role not in allowed_roles:
        raise AuthorizationError(
            "Insufficient permissions",
            details=f"Required role: {' or '.join(sorted(allowed_roles))}",
        )
    return current_user


def require_roles(*roles: Role) -> Callable[..., CurrentUser]:
    """Dependency factory: require an authenticated user with one of the given roles."""
    allowed = {role.value for role in roles}

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        return check_role(current_user, allowed)

    return dependency


require_admin = require_roles(Role.ADMIN)


def get_stats_cache(request: Request) -> StatsCache:
    """Dependency: the application's user statistics cache."""
    return request.app.state.stats_cache


def get_dashboard_cache(request: Request) -> StatsCache:
    """Dependency: the application's dashboard statistics cache."""
    return request.app.state.dashboard_cache


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
) -> AuthResponse:
    """Public self-registration. Always creates a Faculty account; does not log in."""
    user = register_user(
        db, body.username, body.email, body.password, body.role, self_service=True
    )
    stats_cache.invalidate()
    return AuthResponse(
        message="User registered successfully. Please login to continue.",
        user=UserSummary.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[CurrentUser, Depends(require_admin)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
) -> AuthResponse:
    """
    Admin-only account creation with a chosen role.

    The response carries a session cookie for the created account.
    """
    user = register_user(
        db, body.username, body.email, body.password, body.role, self_service=False
    )
    stats_cache.invalidate()
    logger.info("Admin created user", extra={"user_id": user.id, "created_by": admin.id})
    set_session_cookie(response, create_access_token(sub=user.id, role=user.role))
    return AuthResponse(
        message="User registered successfully",
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Authenticate with email or username and password; sets the session cookie."""
    user = authenticate(db, body.email, body.username, body.password)
    set_session_cookie(response, create_access_token(sub=user.id, role=user.role))
    return AuthResponse(message="Login successful", user=UserSummary.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    claims: Annotated[TokenClaims | None, Depends(get_session_claims)],
) -> MessageResponse:
    """Clear the session cookie. Works for banned users and expired tokens too."""
    clear_session_cookie(response)
    if claims is not None:
        logger.info("User logged out", extra={"user_id": claims.sub})
    return MessageResponse(message="Logout successful")


@router.get("/verify", response_model=AuthResponse)
def verify(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> AuthResponse:
    """Confirm the session is valid and return the identity behind it."""
    return AuthResponse(message="Token is valid", user=current_user)
