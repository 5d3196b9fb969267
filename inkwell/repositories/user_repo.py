from inkwell.models.user import User
from inkwell.extensions import db
from inkwell.utils.db import safe_commit

class UserRepo:
    @staticmethod
    def get_by_username(username: str):
        return User.query.filter_by(username=username).first()

    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_id(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def create(user: User):
        db.session.add(user)
        safe_commit()
        return user

    @staticmethod
    def update():
        safe_commit()
