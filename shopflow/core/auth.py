# shopflow/core/auth.py
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from shopflow.core.config import get_settings
from shopflow.core.errors import Forbidden, Unauthenticated
from shopflow.database import get_session
from shopflow.models.user import ROLE_USER, User
from shopflow.repositories.user_repo import UserRepository

settings = get_settings()
users = UserRepository()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public catalog routes can serve guests.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (HS256 using JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified

    Raises:
        Unauthenticated: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired token")


def _default_name_from_email(email: str) -> str:
    if "@" in email:
        return email.split("@", 1)[0][:50]
    return email[:50]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the acting user from a bearer token.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' and 'email'.
      3. Convert 'sub' to UUID to match User.id type.
      4. Find the user row; auto-provision one with role "user" if missing.

    Roles are never taken from the token; vendors and admins are
    promoted in the users table.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise Unauthenticated("Token missing sub/email")

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise Unauthenticated("Invalid sub in token")

    user = users.get_by_id(session, sub_uuid)
    if user is None:
        user = users.create(
            session,
            User(
                id=sub_uuid,
                email=email,
                name=_default_name_from_email(email),
                role=ROLE_USER,
            ),
        )

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Raises:
        Unauthenticated: if the request carries no token.
    """
    if user is None:
        raise Unauthenticated()
    return user


def require_vendor(user: User = Depends(require_auth)) -> User:
    """
    Enforce vendor or admin role.

    Raises:
        Forbidden: for plain customers.
    """
    if not (user.is_vendor or user.is_admin):
        raise Forbidden("Only vendors can create products")
    return user
