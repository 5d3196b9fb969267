from flask import current_app

from inkwell.errors import ConflictError, NotFoundError, ValidationError
from inkwell.models.bookmark import Bookmark
from inkwell.repositories.book_repo import BookRepo
from inkwell.repositories.bookmark_repo import BookmarkRepo

# BIGINT sınırı
MAX_ID = 2 ** 63 - 1


class BookmarkService:
    @staticmethod
    def _normalize_page_index(page_index):
        # eksik ve null aynı anahtar; 0 geçerli bir sayfa
        if page_index is None:
            return None
        if isinstance(page_index, bool):
            raise ValidationError("pageIndex must be a non-negative integer", reason="invalid_field")
        try:
            value = int(page_index)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("pageIndex must be a non-negative integer", reason="invalid_field")
        if not 0 <= value <= MAX_ID:
            raise ValidationError("pageIndex must be a non-negative integer", reason="invalid_field")
        return value

    @staticmethod
    def normalize_book_id(book_id) -> int:
        if book_id is None or book_id == "":
            raise ValidationError("Book ID is required", reason="missing_fields")
        if isinstance(book_id, bool):
            raise ValidationError("Book ID must be a positive integer", reason="invalid_field")
        try:
            value = int(book_id)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError("Book ID must be a positive integer", reason="invalid_field")
        if not 0 < value <= MAX_ID:
            raise ValidationError("Book ID must be a positive integer", reason="invalid_field")
        return value

    @staticmethod
    def add(user_id: int, book_id, page_index=None):
        book_id = BookmarkService.normalize_book_id(book_id)
        page_index = BookmarkService._normalize_page_index(page_index)

        book = BookRepo.get_public(book_id)
        if not book:
            raise NotFoundError("Book not found")

        if BookmarkRepo.find(user_id, book_id, page_index):
            raise ConflictError("Bookmark already exists")

        bookmark = Bookmark(user_id=user_id, book_id=book_id, page_index=page_index)
        BookmarkRepo.create(bookmark)
        current_app.logger.info(f"[bookmark] user={user_id} book={book_id} type={bookmark.type}")
        return bookmark

    @staticmethod
    def remove(bookmark_id: int, user_id: int):
        bookmark = BookmarkRepo.get_owned(bookmark_id, user_id)
        if not bookmark:
            raise NotFoundError("Bookmark not found")
        BookmarkRepo.delete(bookmark)

    @staticmethod
    def list_for_user(user_id: int):
        return BookmarkRepo.list_by_user(user_id)
