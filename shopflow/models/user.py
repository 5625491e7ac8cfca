# shopflow/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

ROLE_USER = "user"
ROLE_VENDOR = "vendor"
ROLE_ADMIN = "admin"


class User(SQLModel, table=True):
    """
    Account acting on the catalog.

    Identity:
      - id: MUST match the auth provider's user id (UUID from JWT "sub")

    Role:
      - "user" | "vendor" | "admin"
      - guests are represented by a missing token.

    Vendors own the products they create; admins may mutate any product.
    Passwords live with the auth provider, not here.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the auth provider's user id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email claim from the access token",
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    role: str = Field(
        default=ROLE_USER,
        index=True,
        description="Application role: user | vendor | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == ROLE_VENDOR
