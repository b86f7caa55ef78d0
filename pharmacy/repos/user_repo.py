from datetime import datetime, timezone

from sqlalchemy import select, update, or_
from sqlalchemy.orm import Session

from pharmacy.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def exists(self, user_id: int) -> bool:
        return self.db.execute(
            select(UserModel.id).where(UserModel.id == user_id)
        ).scalar_one_or_none() is not None

    def find_by_login(self, login: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .where(or_(UserModel.username == login, UserModel.email == login))
            .order_by(UserModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def find_by_username_or_email(self, username: str, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .where(or_(UserModel.username == username, UserModel.email == email))
            .limit(1)
        ).scalar_one_or_none()

    def find_by_google(self, google_id: str, email: str) -> UserModel | None:
        # konto Google ma pierwszenstwo przed dopasowaniem po emailu
        return self.db.execute(
            select(UserModel)
            .where(or_(UserModel.google_id == google_id, UserModel.email == email))
            .order_by((UserModel.google_id == google_id).desc(), UserModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def username_taken(self, username: str) -> bool:
        return self.db.execute(
            select(UserModel.id).where(UserModel.username == username)
        ).first() is not None

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def register_login(self, user_id: int) -> None:
        self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                login_count=UserModel.login_count + 1,
                last_login=datetime.now(timezone.utc),
            )
        )

    def update_fields(self, user_id: int, **fields) -> int:
        result = self.db.execute(
            update(UserModel).where(UserModel.id == user_id).values(**fields)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
