from datetime import datetime
from typing import Dict, Optional

import pytest
from passlib.context import CryptContext

from app.application.ports.user_repo import UserDto, DuplicateUserError
from app.application.services.auth_service import AuthService, INVALID_CREDENTIALS
from app.application.services.token_service import TokenService
from app.exceptions import ValidationError, NotFoundError

# Cheap scheme keeps the suite fast; production uses bcrypt
fast_hasher = CryptContext(schemes=["md5_crypt"])


class FakeUserRepo:
    def __init__(self):
        self.users: Dict[int, UserDto] = {}
        self._id = 1
        self.race = False

    def create(self, username: str, email: str, password_hash: str) -> UserDto:
        if self.race:
            raise DuplicateUserError(email)
        user = UserDto(self._id, username, email, password_hash, datetime(2026, 1, 1))
        self.users[user.id] = user
        self._id += 1
        return user

    def get_by_id(self, user_id: int) -> Optional[UserDto]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return next((u for u in self.users.values() if u.email == email), None)

    def find_by_email_or_username(self, email: str, username: str) -> Optional[UserDto]:
        return next((u for u in self.users.values() if u.email == email or u.username == username), None)


@pytest.fixture
def repo():
    return FakeUserRepo()


@pytest.fixture
def tokens():
    return TokenService("s3cret")


@pytest.fixture
def svc(repo, tokens):
    return AuthService(repo, tokens, hasher=fast_hasher)


def test_register_returns_token_and_public_user(svc, tokens):
    out = svc.register("alice", "alice@example.com", "hunter22")
    assert out["success"] is True
    assert out["user"] == {"id": 1, "username": "alice", "email": "alice@example.com"}
    assert tokens.verify(out["token"]).user_id == 1


def test_register_stores_hash_not_password(svc, repo):
    svc.register("alice", "alice@example.com", "hunter22")
    assert repo.users[1].password_hash != "hunter22"
    assert fast_hasher.verify("hunter22", repo.users[1].password_hash)


def test_register_requires_all_fields(svc):
    with pytest.raises(ValidationError) as exc:
        svc.register("alice", "", "hunter22")
    assert exc.value.detail == "All fields required"


def test_register_rejects_short_password(svc):
    with pytest.raises(ValidationError) as exc:
        svc.register("alice", "alice@example.com", "12345")
    assert exc.value.detail == "Password must be at least 6 characters"


def test_register_rejects_taken_email_or_username(svc):
    svc.register("alice", "alice@example.com", "hunter22")
    for username, email in [("alice", "other@example.com"), ("bob", "alice@example.com")]:
        with pytest.raises(ValidationError) as exc:
            svc.register(username, email, "hunter22")
        assert exc.value.detail == "User already exists"


def test_register_race_reported_as_existing(svc, repo):
    repo.race = True
    with pytest.raises(ValidationError) as exc:
        svc.register("alice", "alice@example.com", "hunter22")
    assert exc.value.detail == "User already exists"


def test_login_success(svc, tokens):
    svc.register("alice", "alice@example.com", "hunter22")
    out = svc.login("alice@example.com", "hunter22")
    assert tokens.verify(out["token"]).user_id == 1


def test_login_failures_share_one_message(svc):
    svc.register("alice", "alice@example.com", "hunter22")
    with pytest.raises(ValidationError) as unknown:
        svc.login("nobody@example.com", "hunter22")
    with pytest.raises(ValidationError) as wrong:
        svc.login("alice@example.com", "wrong-pass")
    assert unknown.value.detail == wrong.value.detail == INVALID_CREDENTIALS


def test_login_requires_fields(svc):
    with pytest.raises(ValidationError) as exc:
        svc.login("alice@example.com", None)
    assert exc.value.detail == "Email and password required"


def test_me(svc):
    svc.register("alice", "alice@example.com", "hunter22")
    me = svc.me(1)
    assert me["username"] == "alice"
    assert me["createdAt"] == "2026-01-01T00:00:00"
    with pytest.raises(NotFoundError):
        svc.me(99)
