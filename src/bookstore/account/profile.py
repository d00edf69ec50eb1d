"""Profile management: commands, handler and the profile view."""

from dataclasses import dataclass

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.account.user import User, require_user
from bookstore.domain import bookstore


@bookstore.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)


@bookstore.command(part_of="User")
class ChangePassword:
    user_id = Identifier(required=True)
    old_password = String(required=True, max_length=128)
    new_password = String(required=True, max_length=128)


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    first_name: str | None
    last_name: str | None
    roles: tuple[str, ...]


def user_profile(user_id) -> UserProfile:
    user = require_user(user_id)
    return UserProfile(
        id=str(user.id),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        roles=tuple(user.role_names()),
    )


@bookstore.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        user = require_user(command.user_id)
        user.update_profile(first_name=command.first_name, last_name=command.last_name)
        current_domain.repository_for(User).add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        user = require_user(command.user_id)
        user.change_password(command.old_password, command.new_password)
        current_domain.repository_for(User).add(user)
