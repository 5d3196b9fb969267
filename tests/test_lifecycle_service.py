import datetime

import pytest
from sqlalchemy.exc import SQLAlchemyError

from inkwell.errors import NotFoundError, StoreError
from inkwell.extensions import db
from inkwell.models.book import Active, Book, SoftDeleted
from inkwell.models.bookmark import Bookmark
from inkwell.repositories.book_repo import BookRepo
from inkwell.services.book_service import BookService
from inkwell.services.bookmark_service import BookmarkService
from inkwell.services.lifecycle_service import LifecycleService
from tests.conftest import NOW, make_book

DAY = datetime.timedelta(days=1)


def _snapshot(book):
    return {c.name: getattr(book, c.name) for c in Book.__table__.columns}


def _exists(book_id):
    return db.session.query(Book).filter_by(id=book_id).count() == 1


class TestSoftDelete:
    def test_sets_deletion_fields(self, user):
        book = make_book(user.id)
        result = LifecycleService.soft_delete(book.id, user.id, now=NOW)

        assert result == {"deleted_at": NOW, "scheduled_for_deletion_at": NOW + 10 * DAY}
        assert book.is_deleted is True
        assert book.deleted_at == NOW
        assert book.scheduled_for_deletion_at == NOW + 10 * DAY
        assert book.lifecycle == SoftDeleted(NOW, NOW + 10 * DAY)

    def test_commit_failure_rolls_back_and_raises_store_error(self, user, mocker):
        book = make_book(user.id)
        mocker.patch.object(db.session, "commit", side_effect=SQLAlchemyError("disk full"))

        with pytest.raises(StoreError):
            LifecycleService.soft_delete(book.id, user.id, now=NOW)

        mocker.stopall()
        fresh = db.session.get(Book, book.id)
        assert fresh.deleted_at is None
        assert fresh.scheduled_for_deletion_at is None
        assert fresh.lifecycle == Active()

    def test_already_deleted_not_found(self, user):
        book = make_book(user.id)
        LifecycleService.soft_delete(book.id, user.id, now=NOW)
        with pytest.raises(NotFoundError):
            LifecycleService.soft_delete(book.id, user.id, now=NOW)

    def test_other_owner_not_found(self, user, other_user):
        book = make_book(user.id)
        with pytest.raises(NotFoundError):
            LifecycleService.soft_delete(book.id, other_user.id, now=NOW)
        assert book.is_deleted is False

    def test_deleted_book_hidden_from_default_listing(self, user):
        book = make_book(user.id)
        LifecycleService.soft_delete(book.id, user.id, now=NOW)
        assert BookService.list_my_books(user.id) == []
        assert [b.id for b in BookService.list_my_books(user.id, include_deleted=True)] == [book.id]


class TestRestore:
    def test_delete_then_restore_round_trip(self, user):
        book = make_book(user.id, content="c" * 6000, published_at=NOW - DAY)
        before = _snapshot(book)

        LifecycleService.soft_delete(book.id, user.id, now=NOW)
        restored = LifecycleService.restore(book.id, user.id)

        assert _snapshot(restored) == before
        assert restored.lifecycle == Active()
        assert restored.is_published is True

    def test_restore_active_book_not_found(self, user):
        book = make_book(user.id)
        with pytest.raises(NotFoundError, match="not in deleted state"):
            LifecycleService.restore(book.id, user.id)

    def test_restore_other_owner_not_found(self, user, other_user):
        book = make_book(user.id)
        LifecycleService.soft_delete(book.id, user.id, now=NOW)
        with pytest.raises(NotFoundError):
            LifecycleService.restore(book.id, other_user.id)


class TestPurgeExpired:
    def test_purge_respects_grace_period(self, user):
        book = make_book(user.id)
        book_id = book.id
        LifecycleService.soft_delete(book_id, user.id, now=NOW)

        assert LifecycleService.purge_expired(NOW + 9 * DAY) == 0
        assert _exists(book_id)

        assert LifecycleService.purge_expired(NOW + 11 * DAY) == 1
        assert not _exists(book_id)
        with pytest.raises(NotFoundError):
            BookService.get_my_book(book_id, user.id)

    def test_purge_is_idempotent(self, user):
        for title in ("One", "Two"):
            b = make_book(user.id, title=title)
            LifecycleService.soft_delete(b.id, user.id, now=NOW)

        assert LifecycleService.purge_expired(NOW + 11 * DAY) == 2
        assert LifecycleService.purge_expired(NOW + 11 * DAY) == 0

    def test_exact_schedule_time_not_yet_purged(self, user):
        book = make_book(user.id)
        LifecycleService.soft_delete(book.id, user.id, now=NOW)
        assert LifecycleService.purge_expired(NOW + 10 * DAY) == 0

    def test_active_and_restored_books_untouched(self, user):
        active = make_book(user.id, title="Active")
        restored = make_book(user.id, title="Restored")
        LifecycleService.soft_delete(restored.id, user.id, now=NOW)
        LifecycleService.restore(restored.id, user.id)

        assert LifecycleService.purge_expired(NOW + 30 * DAY) == 0
        assert _exists(active.id)
        assert _exists(restored.id)

    def test_purge_removes_bookmarks(self, user, other_user):
        book = make_book(user.id, published_at=NOW - DAY)
        BookmarkService.add(other_user.id, book.id)
        LifecycleService.soft_delete(book.id, user.id, now=NOW)

        LifecycleService.purge_expired(NOW + 11 * DAY)
        assert db.session.query(Bookmark).count() == 0

    def test_one_failure_does_not_abort_batch(self, user, mocker):
        ids = []
        for title in ("One", "Two", "Three"):
            b = make_book(user.id, title=title)
            LifecycleService.soft_delete(b.id, user.id, now=NOW)
            ids.append(b.id)

        real_delete = BookRepo.delete
        calls = []

        def flaky_delete(book):
            calls.append(book.id)
            if len(calls) == 1:
                raise StoreError("Database operation failed")
            return real_delete(book)

        mocker.patch.object(BookRepo, "delete", side_effect=flaky_delete)

        assert LifecycleService.purge_expired(NOW + 11 * DAY) == 2
        assert calls == ids
        assert _exists(ids[0])
        assert not _exists(ids[1])
        assert not _exists(ids[2])
