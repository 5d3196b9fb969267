import re

from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token

from inkwell.errors import AuthError, ConflictError, NotFoundError, ValidationError
from inkwell.models.user import User
from inkwell.repositories.user_repo import UserRepo

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_MIN, USERNAME_MAX = 3, 30

PROFILE_FIELDS = ("bio", "location", "social_links", "avatar_url")


class AuthService:
    @staticmethod
    def hash_password(password: str) -> str:
        # Şifre hash'i her zaman açıkça burada üretilir (create + update)
        return generate_password_hash(password)

    @staticmethod
    def register(username: str, email: str, password: str, bio: str = ""):
        if not username or not email or not password:
            raise ValidationError("username, email and password are required", reason="missing_fields")
        if not (USERNAME_MIN <= len(username) <= USERNAME_MAX):
            raise ValidationError(
                f"username must be {USERNAME_MIN}-{USERNAME_MAX} characters", reason="invalid_field"
            )
        if not EMAIL_RE.match(email):
            raise ValidationError("email is not valid", reason="invalid_field")

        if UserRepo.get_by_email(email):
            raise ConflictError("User with this email already exists")
        if UserRepo.get_by_username(username):
            raise ConflictError("Username is already taken")

        user = User(
            username=username,
            email=email,
            password_hash=AuthService.hash_password(password),
            bio=bio or "",
        )
        UserRepo.create(user)
        current_app.logger.info(f"[auth] registered user id={user.id}")
        return user

    @staticmethod
    def verify_credentials(email: str, password: str):
        """Returns the user id when the credentials match, otherwise None."""
        user = UserRepo.get_by_email(email)
        if not user or not check_password_hash(user.password_hash, password or ""):
            return None
        return user.id

    @staticmethod
    def issue_token(user) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"username": user.username, "email": user.email},
        )

    @staticmethod
    def login(email: str, password: str):
        user_id = AuthService.verify_credentials(email, password)
        if user_id is None:
            current_app.logger.info("[auth] failed login attempt")
            raise AuthError("Invalid email or password")

        user = UserRepo.get_by_id(user_id)
        return AuthService.issue_token(user), user

    @staticmethod
    def find_user_by_id(user_id: int):
        return UserRepo.get_by_id(user_id)

    @staticmethod
    def find_user_by_email(email: str):
        return UserRepo.get_by_email(email)

    @staticmethod
    def update_profile(user_id: int, data: dict):
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object", reason="invalid_field")
        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        changes = {}
        for k in PROFILE_FIELDS:
            value = data.get(k)
            if value is None:
                continue
            expected = dict if k == "social_links" else str
            if not isinstance(value, expected):
                raise ValidationError(f"{k} has the wrong type", reason="invalid_field")
            changes[k] = value

        # sadece şifre gönderildiyse yeniden hash'le
        password = data.get("password")
        if password is not None and not isinstance(password, str):
            raise ValidationError("password must be a string", reason="invalid_field")

        for k, v in changes.items():
            setattr(user, k, v)
        if password:
            user.password_hash = AuthService.hash_password(password)

        UserRepo.update()
        return user
