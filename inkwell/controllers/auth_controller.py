from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from inkwell.errors import DomainError, ValidationError
from inkwell.services.auth_service import AuthService
from inkwell.utils.responses import json_body, json_error, iso

auth_bp = Blueprint("auth", __name__)


def _user_json(user, private=False):
    data = {
        "id": user.id,
        "username": user.username,
        "bio": user.bio,
        "location": user.location,
        "social_links": user.social_links or {},
        "avatar_url": user.avatar_url,
        "created_at": iso(user.created_at),
    }
    if private:
        data["email"] = user.email
        data["is_admin"] = bool(user.is_admin)
    return data


def _str_field(data: dict, key: str, strip: bool = True) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string", reason="invalid_field")
    return value.strip() if strip else value


@auth_bp.post("/register", endpoint="auth_register")
def register():
    try:
        data = json_body()
        user = AuthService.register(
            username=_str_field(data, "username"),
            email=_str_field(data, "email").lower(),
            password=_str_field(data, "password", strip=False),
            bio=_str_field(data, "bio"),
        )
        token = AuthService.issue_token(user)
        return jsonify({"success": True, "token": token, "user": _user_json(user, private=True)}), 201
    except DomainError as e:
        return json_error(e)


@auth_bp.post("/login", endpoint="auth_login")
def login():
    try:
        data = json_body()
        token, user = AuthService.login(
            _str_field(data, "email").lower(),
            _str_field(data, "password", strip=False),
        )
        return jsonify({"success": True, "token": token, "user": _user_json(user, private=True)})
    except DomainError as e:
        return json_error(e)


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    user = AuthService.find_user_by_id(int(get_jwt_identity()))
    if not user:
        return json_error("User not found", 404)
    return jsonify({"success": True, "user": _user_json(user, private=True)})


@auth_bp.put("/me", endpoint="auth_update_me")
@jwt_required()
def update_me():
    try:
        data = json_body()
        user = AuthService.update_profile(int(get_jwt_identity()), data)
        return jsonify({"success": True, "user": _user_json(user, private=True)})
    except DomainError as e:
        return json_error(e)
