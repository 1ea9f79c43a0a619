# georegions/core/users/__init__.py
"""
Домен пользователей.
"""

from georegions.core.users.models import User, UserCreateDTO, UserUpdateDTO
from georegions.core.users.repository import UserRepository, row_to_user
from georegions.core.users.service import UserService

__all__ = [
    "User",
    "UserCreateDTO",
    "UserUpdateDTO",
    "UserRepository",
    "UserService",
    "row_to_user",
]
