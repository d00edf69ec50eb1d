"""RegisterUser: create a customer account.

Email uniqueness needs a repository query, so it is enforced here rather
than on the aggregate.
"""

from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.account.user import User
from bookstore.domain import bookstore


@bookstore.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)
    confirm_password = String(required=True, max_length=128)
    first_name = String(max_length=100)
    last_name = String(max_length=100)


def email_in_use(email) -> bool:
    repo = current_domain.repository_for(User)
    return bool(repo._dao.query.filter(email=email.strip().lower()).all().items)


@bookstore.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if email_in_use(command.email):
            raise ValidationError({"email": ["Email is already in use"]})
        if command.password != command.confirm_password:
            raise ValidationError({"confirm_password": ["Passwords do not match"]})

        user = User.register(
            email=command.email,
            password=command.password,
            first_name=command.first_name,
            last_name=command.last_name,
        )
        current_domain.repository_for(User).add(user)
        return str(user.id)
