from typing import Protocol, Optional
from datetime import datetime


class UserDto:
    def __init__(self, id: int, username: str, email: str, password_hash: str, created_at: datetime):
        self.id = id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at

    def public(self) -> dict:
        return {"id": self.id, "username": self.username, "email": self.email}


class DuplicateUserError(Exception):
    """Raised when a username or email is already taken."""


class UserRepository(Protocol):
    def create(self, username: str, email: str, password_hash: str) -> UserDto:
        ...

    def get_by_id(self, user_id: int) -> Optional[UserDto]:
        ...

    def get_by_email(self, email: str) -> Optional[UserDto]:
        ...

    def find_by_email_or_username(self, email: str, username: str) -> Optional[UserDto]:
        ...
