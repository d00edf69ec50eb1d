"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from bookstore.domain import bookstore


@bookstore.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@bookstore.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    first_name = String()
    last_name = String()


@bookstore.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    changed_at = DateTime(required=True)
