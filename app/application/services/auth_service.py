import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from passlib.context import CryptContext

from ..ports.user_repo import UserRepository, DuplicateUserError
from .token_service import TokenService
from ...exceptions import ValidationError, NotFoundError

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class AuthService:
    user_repo: UserRepository
    tokens: TokenService
    min_password_length: int = 6
    hasher: CryptContext = pwd_context

    def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not username or not email or not password:
            raise ValidationError("All fields required")
        if len(password) < self.min_password_length:
            raise ValidationError(f"Password must be at least {self.min_password_length} characters")

        if self.user_repo.find_by_email_or_username(email, username):
            raise ValidationError("User already exists")

        try:
            user = self.user_repo.create(username, email, self.hasher.hash(password))
        except DuplicateUserError:
            # Lost a race against a concurrent registration
            raise ValidationError("User already exists")

        logger.info(f"Registered user {user.id}")
        return {"success": True, "token": self.tokens.issue(user.id), "user": user.public()}

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password required")

        user = self.user_repo.get_by_email(email)
        # Same message for unknown email and wrong password
        if not user or not self.hasher.verify(password, user.password_hash):
            logger.info("Login rejected")
            raise ValidationError(INVALID_CREDENTIALS)

        return {"success": True, "token": self.tokens.issue(user.id), "user": user.public()}

    def me(self, user_id: int) -> Dict[str, Any]:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return {**user.public(), "createdAt": user.created_at.isoformat()}
