from inkwell.utils.clock import utcnow
from inkwell.extensions import db

class Bookmark(db.Model):
    __tablename__ = "bookmarks"
    __table_args__ = (
        db.UniqueConstraint("user_id", "book_id", "page_index", name="uq_bookmarks_user_book_page"),
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    # None = kitabın tamamı
    page_index = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship("User", backref="bookmarks")
    book = db.relationship("Book", back_populates="bookmarks")

    @property
    def type(self) -> str:
        return "book" if self.page_index is None else "page"
