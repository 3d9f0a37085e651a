# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
User endpoints – registration, login, current-user profile.

The handlers are thin: they translate request bodies into AuthService
calls and service results into the ``{status, data}`` envelope.  Every
failure is an ``AppError`` rendered by core.exceptions.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from core.security import TokenIssuer, get_current_user_id, get_token_issuer
from auth.service import AuthService
from auth.schemas import (
    AuthenticatedUser,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisteredUser,
    RegisterRequest,
    RegisterResponse,
    UserSummary,
)

router = APIRouter(prefix="/api/users", tags=["users"])


def get_auth_service(
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(db, request.app.state.settings, tokens)


# ---------------------------------------------------------------------------
# POST /api/users/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """
    Create an account.  The generated passphrase is part of this response
    and nowhere else – the client must show it to the user now.
    """
    result = service.register(body.name, body.email, body.phone, body.password)
    summary = UserSummary.from_user(result.user)
    return RegisterResponse(
        data=RegisteredUser(**summary.model_dump(), passphrase=result.passphrase, token=result.token)
    )


# ---------------------------------------------------------------------------
# POST /api/users/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Authenticate with password (+ passphrase) and return a signed token."""
    result = service.login(body.email, body.password, body.passphrase)
    summary = UserSummary.from_user(result.user)
    return LoginResponse(data=AuthenticatedUser(**summary.model_dump(), token=result.token))


# ---------------------------------------------------------------------------
# GET /api/users/profile
# ---------------------------------------------------------------------------


@router.get("/profile", response_model=ProfileResponse)
def profile(
    user_id: int = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
):
    """Return the authenticated user's public profile (no secrets)."""
    return ProfileResponse(data=UserSummary.from_user(service.profile(user_id)))
