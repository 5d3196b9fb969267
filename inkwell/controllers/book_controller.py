# inkwell/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from inkwell.errors import DomainError
from inkwell.services.book_service import BookService
from inkwell.services.lifecycle_service import LifecycleService
from inkwell.services.publishing_service import PublishingService
from inkwell.utils.responses import json_body, json_error, iso

book_bp = Blueprint("books", __name__)


def _current_user_id() -> int:
    return int(get_jwt_identity())


def _author_json(user):
    if not user:
        return None
    return {"id": user.id, "username": user.username, "avatar_url": user.avatar_url}


def book_json(b, with_author=False):
    data = {
        "id": b.id,
        "user_id": b.user_id,
        "title": b.title,
        "subtitle": b.subtitle,
        "description": b.description,
        "synopsis": b.synopsis,
        "content": b.content,
        "genre": list(b.genre or []),
        "tags": list(b.tags or []),
        "cover_image": b.cover_image,
        "language": b.language,
        "license": b.license,
        "is_published": bool(b.is_published),
        "is_monetized": bool(b.is_monetized),
        "price": float(b.price) if b.price is not None else None,
        "created_at": iso(b.created_at),
        "last_saved_at": iso(b.last_saved_at),
        "published_at": iso(b.published_at),
        "is_deleted": bool(b.is_deleted),
        "deleted_at": iso(b.deleted_at),
        "scheduled_for_deletion_at": iso(b.scheduled_for_deletion_at),
    }
    if with_author:
        data["author"] = _author_json(b.user)
    return data


# -----------------------------
# Public
# -----------------------------
@book_bp.get("/discover")
def discover():
    author = request.args.get("author", type=int)
    books = BookService.discover(
        genre=request.args.get("genre"),
        search=request.args.get("search"),
        author_id=author,
    )
    return jsonify({"success": True, "data": [book_json(b, with_author=True) for b in books]})


@book_bp.get("/public/<int:book_id>")
def get_public_book(book_id: int):
    try:
        b = BookService.get_public_book(book_id)
        return jsonify({"success": True, "data": book_json(b, with_author=True)})
    except DomainError as e:
        return json_error(e)


@book_bp.get("/user/<int:user_id>")
def user_books(user_id: int):
    books = BookService.list_user_published(user_id)
    return jsonify({"success": True, "data": [book_json(b, with_author=True) for b in books]})


# -----------------------------
# Author (JWT)
# -----------------------------
@book_bp.get("/publish-limit")
@jwt_required()
def publish_limit():
    status = PublishingService.get_publish_limit_status(_current_user_id())
    return jsonify({"success": True, **status})


@book_bp.post("/")
@jwt_required()
def create_book():
    data = json_body()
    try:
        b = BookService.create_book(_current_user_id(), data)
        return jsonify({"success": True, "data": book_json(b)}), 201
    except DomainError as e:
        return json_error(e)


@book_bp.get("/my-books")
@jwt_required()
def my_books():
    include_deleted = request.args.get("includeDeleted") == "true"
    books = BookService.list_my_books(_current_user_id(), include_deleted=include_deleted)
    return jsonify({"success": True, "data": [book_json(b) for b in books]})


@book_bp.get("/<int:book_id>")
@jwt_required()
def get_book(book_id: int):
    try:
        b = BookService.get_my_book(book_id, _current_user_id())
        return jsonify({"success": True, "data": book_json(b)})
    except DomainError as e:
        return json_error(e)


@book_bp.put("/<int:book_id>")
@jwt_required()
def save_draft(book_id: int):
    data = json_body()
    try:
        b = PublishingService.save_draft(book_id, _current_user_id(), data)
        return jsonify({"success": True, "data": book_json(b)})
    except DomainError as e:
        return json_error(e)


@book_bp.put("/<int:book_id>/publish")
@jwt_required()
def publish_book(book_id: int):
    data = json_body()
    try:
        b = PublishingService.publish(book_id, _current_user_id(), data)
        return jsonify({"success": True, "data": book_json(b)})
    except DomainError as e:
        return json_error(e)


@book_bp.delete("/<int:book_id>")
@jwt_required()
def delete_book(book_id: int):
    try:
        result = LifecycleService.soft_delete(book_id, _current_user_id())
        return jsonify({
            "success": True,
            "message": "Book has been scheduled for deletion and will be permanently removed in 10 days",
            "deleted_at": iso(result["deleted_at"]),
            "scheduled_for_deletion_at": iso(result["scheduled_for_deletion_at"]),
        })
    except DomainError as e:
        return json_error(e)


@book_bp.post("/<int:book_id>/restore")
@jwt_required()
def restore_book(book_id: int):
    try:
        b = LifecycleService.restore(book_id, _current_user_id())
        return jsonify({"success": True, "message": "Book has been restored successfully", "data": book_json(b)})
    except DomainError as e:
        return json_error(e)
