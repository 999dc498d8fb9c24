"""Request authentication.

A single AuthContext interface with two variants: AnonymousContext for
requests without a valid token, and UserContext for requests carrying a
verified bearer token. Route dependencies ask the context for a role rather
than inspecting tokens themselves.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"


class AuthError(Exception):
    def __init__(self, message: str = "Authentication required", status_code: int = 401):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class AuthenticatedUser:
    id: str
    email: str
    role: str

    def to_dict(self) -> dict:
        return asdict(self)


class AuthContext:
    authenticated = False
    user: AuthenticatedUser | None = None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    @property
    def is_instructor(self) -> bool:
        return self.user is not None and self.user.role in ("admin", "instructor")

    def require_role(self, *roles: str) -> AuthenticatedUser:
        """Return the user if it holds one of `roles` (any role when none given)."""
        if self.user is None:
            raise AuthError("Authentication required")
        if roles and self.user.role not in roles:
            # Roles are listed most-privileged first; name the lowest one accepted.
            raise AuthError(f"{roles[-1].capitalize()} access required")
        return self.user


class AnonymousContext(AuthContext):
    pass


class UserContext(AuthContext):
    authenticated = True

    def __init__(self, user: AuthenticatedUser):
        self.user = user


def determine_role(email: str) -> str:
    normalized = email.lower().strip()
    if normalized in settings.admin_emails:
        logger.info("Admin access granted (configured): %s", normalized)
        return "admin"
    if settings.ENVIRONMENT == "development" and "admin" in normalized:
        logger.info("Admin access granted (development pattern): %s", normalized)
        return "admin"
    if normalized in settings.instructor_emails:
        return "instructor"
    return "student"


def create_access_token(user: dict, expires_delta: timedelta | None = None) -> str:
    if not settings.AUTH_JWT_SECRET:
        raise RuntimeError("AUTH_JWT_SECRET is not configured")
    try:
        to_encode = {"sub": str(user["id"]), "email": user["email"]}
    except KeyError as e:
        logger.error("Missing user field in JWT payload: %s", e)
        raise ValueError(f"Invalid user data for token generation: {e}") from e

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    if not settings.AUTH_JWT_SECRET:
        return None
    try:
        return jwt.decode(token, settings.AUTH_JWT_SECRET, algorithms=[settings.AUTH_JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("JWT decode failed: token has expired.")
        return None
    except JWTError as e:
        logger.warning("JWT decode failed: %s", e)
        return None


def extract_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


async def resolve_context(token: str | None, db: AsyncSession) -> AuthContext:
    if not token:
        return AnonymousContext()
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return AnonymousContext()

    user_id = str(payload["sub"])
    email = payload.get("email") or ""
    try:
        record = await db.get(User, user_id)
    except SQLAlchemyError as e:
        logger.warning("User role lookup failed for %s, using email-based role: %s", user_id, e)
        record = None

    if record is not None:
        return UserContext(AuthenticatedUser(id=record.id, email=record.email, role=record.role))
    if not email:
        return AnonymousContext()
    return UserContext(AuthenticatedUser(id=user_id, email=email, role=determine_role(email)))


async def get_auth_context(request: Request, db: AsyncSession = Depends(get_db)) -> AuthContext:
    return await resolve_context(extract_token(request), db)


async def require_user(context: AuthContext = Depends(get_auth_context)) -> AuthenticatedUser:
    return context.require_role()


async def require_instructor(context: AuthContext = Depends(get_auth_context)) -> AuthenticatedUser:
    return context.require_role("admin", "instructor")


async def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthenticatedUser:
    user = context.require_role("admin")
    logger.info("Admin API access granted: %s", user.email)
    return user
