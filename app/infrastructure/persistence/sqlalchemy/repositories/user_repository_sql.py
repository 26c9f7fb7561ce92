from typing import Optional
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, or_

from .....db.models import User
from .....exceptions import StorageError
from .....application.ports.user_repo import UserRepository, UserDto, DuplicateUserError


class SqlUserRepository(UserRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )

    def create(self, username: str, email: str, password_hash: str) -> UserDto:
        user = User(username=username, email=email, password_hash=password_hash)
        with Session(self.engine) as session:
            try:
                session.add(user)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateUserError(str(e)) from e
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError("Error creating user") from e
            session.refresh(user)
            return self._to_dto(user)

    def _first(self, statement) -> Optional[UserDto]:
        try:
            with Session(self.engine) as session:
                user = session.exec(statement).first()
                return self._to_dto(user) if user else None
        except SQLAlchemyError as e:
            raise StorageError("Database error") from e

    def get_by_id(self, user_id: int) -> Optional[UserDto]:
        return self._first(select(User).where(User.id == user_id))

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return self._first(select(User).where(User.email == email))

    def find_by_email_or_username(self, email: str, username: str) -> Optional[UserDto]:
        return self._first(select(User).where(or_(User.email == email, User.username == username)))
