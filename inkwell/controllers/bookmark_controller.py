from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from inkwell.errors import DomainError
from inkwell.services.bookmark_service import BookmarkService
from inkwell.utils.responses import json_body, json_error, iso

bookmark_bp = Blueprint("bookmarks", __name__)


def _bookmark_json(bm):
    book = bm.book
    owner = book.user if book else None
    return {
        "id": bm.id,
        "user_id": bm.user_id,
        "book_id": bm.book_id,
        "page_index": bm.page_index,
        "type": bm.type,
        "created_at": iso(bm.created_at),
        "book": {
            "id": book.id,
            "title": book.title,
            "cover_image": book.cover_image,
            "is_published": bool(book.is_published),
            "is_deleted": bool(book.is_deleted),
            "author": {
                "id": owner.id,
                "username": owner.username,
                "avatar_url": owner.avatar_url,
            } if owner else None,
        } if book else None,
    }


@bookmark_bp.get("/")
@jwt_required()
def list_bookmarks():
    rows = BookmarkService.list_for_user(int(get_jwt_identity()))
    return jsonify({"success": True, "data": [_bookmark_json(x) for x in rows]})


@bookmark_bp.post("/")
@jwt_required()
def add_bookmark():
    data = json_body()
    book_id = data.get("bookId", data.get("book_id"))
    page_index = data.get("pageIndex", data.get("page_index"))
    try:
        bm = BookmarkService.add(int(get_jwt_identity()), book_id, page_index)
        return jsonify({"success": True, "data": _bookmark_json(bm)}), 201
    except DomainError as e:
        return json_error(e)


@bookmark_bp.delete("/<int:bookmark_id>")
@jwt_required()
def remove_bookmark(bookmark_id: int):
    try:
        BookmarkService.remove(bookmark_id, int(get_jwt_identity()))
        return jsonify({"success": True, "message": "Bookmark removed successfully"})
    except DomainError as e:
        return json_error(e)
