from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import validates

from inkwell.extensions import db
from inkwell.utils.clock import utcnow

DELETION_GRACE_PERIOD = timedelta(days=10)


@dataclass(frozen=True)
class Active:
    pass


@dataclass(frozen=True)
class SoftDeleted:
    deleted_at: datetime
    scheduled_at: datetime


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=False)
    synopsis = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False, default="")

    genre = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=False, default=list)

    cover_image = db.Column(db.String(500), nullable=True)
    language = db.Column(db.String(50), nullable=False, default="English")
    license = db.Column(db.String(100), nullable=False, default="All rights reserved")

    is_published = db.Column(db.Boolean, nullable=False, default=False)
    is_monetized = db.Column(db.Boolean, nullable=False, default=False)
    price = db.Column(db.Numeric(10, 2), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    last_saved_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    published_at = db.Column(db.DateTime, nullable=True, index=True)

    # Soft delete: iki kolon birlikte set/clear edilir (mark_deleted / mark_restored)
    deleted_at = db.Column(db.DateTime, nullable=True)
    scheduled_for_deletion_at = db.Column(db.DateTime, nullable=True, index=True)

    user = db.relationship("User", backref="books")
    bookmarks = db.relationship("Bookmark", back_populates="book", cascade="all, delete-orphan")

    @validates("user_id")
    def _validate_owner(self, key, value):
        if self.user_id is not None and value != self.user_id:
            raise ValueError("Book owner cannot be changed")
        return value

    @hybrid_property
    def is_deleted(self):
        return self.deleted_at is not None

    @is_deleted.expression
    def is_deleted(cls):
        return cls.deleted_at.isnot(None)

    @property
    def lifecycle(self):
        if self.deleted_at is None:
            return Active()
        return SoftDeleted(self.deleted_at, self.scheduled_for_deletion_at)

    def mark_deleted(self, now: datetime) -> SoftDeleted:
        self.deleted_at = now
        self.scheduled_for_deletion_at = now + DELETION_GRACE_PERIOD
        return self.lifecycle

    def mark_restored(self) -> None:
        self.deleted_at = None
        self.scheduled_for_deletion_at = None
