"""User aggregate (CQRS): the account that owns a cart, orders and reviews.

Passwords are stored as passlib hashes; the plain text never reaches the
aggregate's fields.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from passlib.context import CryptContext
from protean.fields import Boolean, DateTime, String, Text
from protean.utils.globals import current_domain

from bookstore.account.events import PasswordChanged, ProfileUpdated, UserRegistered
from bookstore.domain import bookstore
from bookstore.shared.errors import InvalidCredential

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class Role(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


@bookstore.aggregate
class User:
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=255)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    roles = Text()  # JSON array of role names
    enabled = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, email, password, first_name=None, last_name=None, roles=None):
        now = datetime.now(UTC)
        user = cls(
            email=email.strip().lower(),
            password_hash=pwd_context.hash(password),
            first_name=first_name,
            last_name=last_name,
            roles=json.dumps(roles or [Role.CUSTOMER.value]),
            enabled=True,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                registered_at=now,
            )
        )
        return user

    def verify_password(self, password) -> bool:
        return pwd_context.verify(password, self.password_hash)

    def role_names(self) -> list[str]:
        return json.loads(self.roles) if self.roles else []

    def update_profile(self, first_name, last_name):
        self.first_name = first_name
        self.last_name = last_name
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                first_name=first_name,
                last_name=last_name,
            )
        )

    def change_password(self, old_password, new_password):
        if not self.verify_password(old_password):
            raise InvalidCredential({"old_password": ["Incorrect old password"]})

        now = datetime.now(UTC)
        self.password_hash = pwd_context.hash(new_password)
        self.updated_at = now

        self.raise_(PasswordChanged(user_id=str(self.id), changed_at=now))


def require_user(user_id) -> User:
    """Load a user or raise ObjectNotFoundError."""
    return current_domain.repository_for(User).get(str(user_id))
