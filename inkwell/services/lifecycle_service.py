# inkwell/services/lifecycle_service.py
from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from inkwell.errors import NotFoundError, StoreError
from inkwell.extensions import db
from inkwell.repositories.book_repo import BookRepo
from inkwell.utils.clock import utcnow


class LifecycleService:
    """
    Active -> (soft delete) -> SoftDeleted -> (restore) -> Active
    SoftDeleted -> (purge, süre dolunca) -> Purged (kayıt silinir)
    """

    @staticmethod
    def soft_delete(book_id: int, user_id: int, now: datetime | None = None) -> dict:
        now = now or utcnow()
        book = BookRepo.get_owned(book_id, user_id, deleted=False)
        if not book:
            raise NotFoundError("Book not found or already deleted")

        state = book.mark_deleted(now)
        BookRepo.update()
        current_app.logger.info(
            f"[lifecycle] book={book.id} soft-deleted, purge at {state.scheduled_at.isoformat()}"
        )
        return {"deleted_at": state.deleted_at, "scheduled_for_deletion_at": state.scheduled_at}

    @staticmethod
    def restore(book_id: int, user_id: int):
        book = BookRepo.get_owned(book_id, user_id, deleted=True)
        if not book:
            raise NotFoundError("Book not found or not in deleted state")

        # is_published'a dokunma
        book.mark_restored()
        BookRepo.update()
        current_app.logger.info(f"[lifecycle] book={book.id} restored")
        return book

    @staticmethod
    def purge_expired(now: datetime | None = None) -> int:
        """
        scheduled_for_deletion_at < now olan soft-deleted kitapları kalıcı siler.
        Tek bir kitabın hatası batch'i durdurmaz: loglanır, devam edilir.
        Tekrar çağrılması güvenli (silinmiş kayıt sorguya zaten gelmez).
        """
        now = now or utcnow()
        book_ids = [b.id for b in BookRepo.find_expired(now)]
        current_app.logger.info(f"[purge] found {len(book_ids)} books to permanently delete")

        purged = 0
        failed = 0
        for book_id in book_ids:
            try:
                book = BookRepo.get(book_id)
                if book is None or not book.is_deleted:
                    # bu arada silinmiş ya da geri alınmış
                    continue
                BookRepo.delete(book)
                purged += 1
                current_app.logger.info(f"[purge] permanently deleted book={book_id}")
            except (StoreError, SQLAlchemyError):
                db.session.rollback()
                failed += 1
                current_app.logger.exception(f"[purge] failed to delete book={book_id}")

        current_app.logger.info(f"[purge] done purged={purged} failed={failed}")
        return purged
