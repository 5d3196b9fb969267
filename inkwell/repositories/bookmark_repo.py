from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from inkwell.errors import ConflictError
from inkwell.models.book import Book
from inkwell.models.bookmark import Bookmark
from inkwell.extensions import db
from inkwell.utils.db import safe_commit

class BookmarkRepo:
    @staticmethod
    def find(user_id: int, book_id: int, page_index: int | None):
        q = Bookmark.query.filter(Bookmark.user_id == user_id, Bookmark.book_id == book_id)
        # NULL = NULL SQL'de eşleşmez, is_ ile ayrıca kontrol
        if page_index is None:
            q = q.filter(Bookmark.page_index.is_(None))
        else:
            q = q.filter(Bookmark.page_index == page_index)
        return q.first()

    @staticmethod
    def get_owned(bookmark_id: int, user_id: int):
        return Bookmark.query.filter_by(id=bookmark_id, user_id=user_id).first()

    @staticmethod
    def list_by_user(user_id: int):
        return (
            Bookmark.query
            .options(joinedload(Bookmark.book).joinedload(Book.user))
            .filter(Bookmark.user_id == user_id)
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
            .all()
        )

    @staticmethod
    def create(bookmark: Bookmark):
        db.session.add(bookmark)
        try:
            db.session.flush()
        except IntegrityError as e:
            # eşzamanlı aynı istek: unique constraint yakaladı
            db.session.rollback()
            raise ConflictError("Bookmark already exists") from e
        safe_commit()
        return bookmark

    @staticmethod
    def delete(bookmark: Bookmark):
        db.session.delete(bookmark)
        safe_commit()
