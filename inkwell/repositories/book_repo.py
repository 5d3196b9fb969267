from datetime import datetime

from inkwell.models.book import Book
from inkwell.extensions import db
from inkwell.utils.db import safe_commit

class BookRepo:
    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def get_owned(book_id: int, user_id: int, deleted: bool | None = False):
        """
        deleted=False -> sadece aktif, True -> sadece soft-deleted, None -> hepsi
        """
        q = Book.query.filter(Book.id == book_id, Book.user_id == user_id)
        if deleted is not None:
            q = q.filter(Book.is_deleted if deleted else ~Book.is_deleted)
        return q.first()

    @staticmethod
    def get_public(book_id: int):
        return Book.query.filter(
            Book.id == book_id,
            Book.is_published.is_(True),
            ~Book.is_deleted,
        ).first()

    @staticmethod
    def list_by_user(user_id: int, include_deleted: bool = False):
        q = Book.query.filter(Book.user_id == user_id)
        if not include_deleted:
            q = q.filter(~Book.is_deleted)
        return q.order_by(Book.last_saved_at.desc(), Book.id.desc()).all()

    @staticmethod
    def list_published(author_id: int | None = None):
        q = Book.query.filter(Book.is_published.is_(True), ~Book.is_deleted)
        if author_id is not None:
            q = q.filter(Book.user_id == author_id)
        return q.order_by(Book.published_at.desc(), Book.id.desc()).all()

    @staticmethod
    def count_published_since(user_id: int, since: datetime) -> int:
        return Book.query.filter(
            Book.user_id == user_id,
            Book.published_at >= since,
        ).count()

    @staticmethod
    def nth_oldest_published_since(user_id: int, since: datetime, n: int):
        """Pencere içindeki n. en eski published_at (1 = en eski)."""
        return (
            db.session.query(Book.published_at)
            .filter(Book.user_id == user_id, Book.published_at >= since)
            .order_by(Book.published_at.asc(), Book.id.asc())
            .offset(max(0, n - 1))
            .limit(1)
            .scalar()
        )

    @staticmethod
    def find_expired(now: datetime):
        return Book.query.filter(
            Book.is_deleted,
            Book.scheduled_for_deletion_at < now,
        ).order_by(Book.id).all()

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        safe_commit()
        return book

    @staticmethod
    def update():
        safe_commit()

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
        safe_commit()
