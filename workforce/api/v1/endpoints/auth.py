"""
Auth endpoints — registration, login (OAuth2 password flow), token refresh,
logout and the caller's own profile.
"""

import logging

from fastapi import (APIRouter, Cookie, Depends, HTTPException, Request,
                     Response, status)
from fastapi.security import OAuth2PasswordRequestForm
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.api.v1.deps import (get_current_active_user, get_db,
                                   require_admin)
from workforce.core.access import Actor
from workforce.core.config import settings
from workforce.core.enums import Role
from workforce.core.exceptions import ValidationError
from workforce.core.security import (create_access_token, create_refresh_token,
                                     decode_refresh_token, get_password_hash,
                                     verify_password)
from workforce.models.user import User
from workforce.schemas.common import MessageResponse
from workforce.schemas.user import (ProfileUpdate, RefreshRequest,
                                    RegisterRequest, Token, UserCreate,
                                    UserRead)

# Keyed by client IP; limits come from settings.
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _issue_tokens(response: Response, user: User) -> Token:
    access_token = create_access_token(user.id)
    refresh_token = create_refresh_token(user.id)
    _set_auth_cookies(response, access_token, refresh_token)
    return Token(access_token=access_token, refresh_token=refresh_token)


async def _ensure_unique(db: AsyncSession, username: str, email: str) -> None:
    existing = await db.execute(
        select(User).where(or_(User.username == username, User.email == email))
    )
    clash = existing.scalars().first()
    if clash is not None:
        field = "Username" if clash.username == username else "Email"
        raise ValidationError(f"{field} already registered")


async def _create_user(db: AsyncSession, body: RegisterRequest, role: Role) -> User:
    await _ensure_unique(db, body.username, body.email)
    user = User(
        username=body.username,
        email=body.email,
        name=body.name,
        department=body.department,
        hashed_password=get_password_hash(body.password),
        role=role.value,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s registered with role %s", user.username, user.role)
    return user


@router.post("/register", response_model=UserRead, status_code=201)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Self-service sign-up.  New accounts are always employees."""
    return await _create_user(db, body, Role.EMPLOYEE)


@router.post("/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_for_access_token(
    request: Request,
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate with username (or email) and password.

    Returns the tokens in the body and as HttpOnly cookies.
    """
    login = form_data.username.strip()
    result = await db.execute(
        select(User).where(or_(User.username == login, User.email == login.lower()))
    )
    user = result.scalars().first()

    if user is None or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return _issue_tokens(response, user)


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_access_token_endpoint(
    request: Request,
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(None, alias="refresh_token"),
    db: AsyncSession = Depends(get_db),
) -> Token:
    # Priority: Body > Cookie
    token_str = body.refresh_token if body and body.refresh_token else refresh_token_cookie
    if not token_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token missing",
        )

    payload = decode_refresh_token(token_str)
    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
        )

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return _issue_tokens(response, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Clear auth cookies and end the session."""
    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return MessageResponse(message="Logged out")


# ── User management (admin-only) ───────────────────────────────────
@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    _admin: Actor = Depends(require_admin),
) -> User:
    """Create an account with any role (admin only)."""
    return await _create_user(db, body, body.role)


# ── Own profile ─────────────────────────────────────────────────────
@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.put("/me", response_model=UserRead)
async def update_current_user(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Update name, email, department or password.  Role is not editable here."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and changes["email"] != current_user.email:
        taken = await db.execute(select(User.id).where(User.email == changes["email"]))
        if taken.scalar_one_or_none() is not None:
            raise ValidationError("Email already registered")

    password = changes.pop("password", None)
    if password:
        current_user.hashed_password = get_password_hash(password)
    for field, value in changes.items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)
    logger.info("User %s updated profile fields %s", current_user.id, sorted(changes))
    return current_user
