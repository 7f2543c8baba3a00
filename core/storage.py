from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import Depends

from core.database import get_db
from core.models import User


class UserStorage:
    """Thin data-access layer over the ``users`` table.

    Lookups return ``None`` when nothing matches. Uniqueness of username,
    phone, wwid and api_token is left to the database, so writes may raise
    ``sqlalchemy.exc.IntegrityError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def get_user_by_phone(self, phone: str) -> User | None:
        return self.db.query(User).filter(User.phone == phone).first()

    def get_user_by_wwid(self, wwid: str) -> User | None:
        return self.db.query(User).filter(User.wwid == wwid).first()

    def get_user_by_username_or_phone(self, username_or_phone: str) -> User | None:
        return (
            self.db.query(User)
            .filter(or_(User.username == username_or_phone, User.phone == username_or_phone))
            .first()
        )

    def get_user_by_api_token(self, token: str) -> User | None:
        return self.db.query(User).filter(User.api_token == token).first()

    def create_user(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_user_wwid(self, user_id: str, wwid: str) -> None:
        self._update(user_id, wwid=wwid)

    def update_user_spin(self, user_id: str, spin: str) -> None:
        self._update(user_id, spin=spin)

    def update_user_api_enabled(self, user_id: str, enabled: bool) -> None:
        self._update(user_id, api_enabled=enabled)

    def update_user_api_token(self, user_id: str, token: str | None) -> None:
        self._update(user_id, api_token=token)

    def _update(self, user_id: str, **values) -> None:
        self.db.query(User).filter(User.id == user_id).update(values, synchronize_session="fetch")
        self.db.commit()


def get_storage(db: Session = Depends(get_db)) -> UserStorage:
    return UserStorage(db)
