from src.domain.entities import User, UserRole
from src.domain.value_objects import Email


def make_user(role: UserRole = UserRole.USER, user_id: str = None, email: str = None, **kwargs) -> User:
    user_id = user_id or f"{role.value.lower()}-id"
    return User(
        id=user_id,
        email=Email(email or f"{user_id}@company.com"),
        name=kwargs.pop("name", f"{role.value.title()} Person"),
        role=role,
        **kwargs,
    )


def users_by_id(*users: User):
    """side_effect for find_by_id resolving the given users"""
    index = {user.id: user for user in users}

    async def find_by_id(user_id):
        return index.get(user_id)

    return find_by_id
