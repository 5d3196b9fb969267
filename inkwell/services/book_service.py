from inkwell.errors import NotFoundError, ValidationError
from inkwell.models.book import Book
from inkwell.repositories.book_repo import BookRepo
from inkwell.utils.clock import utcnow

class BookService:
    @staticmethod
    def create_book(user_id: int, data: dict):
        for k in ("title", "description"):
            if data.get(k) is not None and not isinstance(data[k], str):
                raise ValidationError(f"{k} must be a string", reason="invalid_field")
        title = (data.get("title") or "").strip()
        description = (data.get("description") or "").strip()
        if not title or not description:
            raise ValidationError("Title and description are required", reason="missing_fields")

        now = utcnow()
        book = Book(
            user_id=user_id,
            title=title,
            description=description,
            content="",
            created_at=now,
            last_saved_at=now,
        )
        return BookRepo.create(book)

    @staticmethod
    def list_my_books(user_id: int, include_deleted: bool = False):
        return BookRepo.list_by_user(user_id, include_deleted=include_deleted)

    @staticmethod
    def get_my_book(book_id: int, user_id: int):
        # soft-deleted kitaplar da sahibine görünür (restore için)
        book = BookRepo.get_owned(book_id, user_id, deleted=None)
        if not book:
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    def get_public_book(book_id: int):
        book = BookRepo.get_public(book_id)
        if not book:
            raise NotFoundError("Book not found or not published")
        return book

    @staticmethod
    def discover(genre: str | None = None, search: str | None = None, author_id: int | None = None):
        """
        Yayınlanmış + silinmemiş kitaplar, en yeni yayın önce.
        search: başlık/açıklama (case-insensitive) veya birebir tag.
        genre/tag JSON kolon olduğu için filtre Python tarafında.
        """
        search = (search or "").strip() or None
        books = BookRepo.list_published(author_id=author_id)

        if genre:
            books = [b for b in books if genre in (b.genre or [])]

        if search:
            needle = search.lower()
            books = [
                b for b in books
                if needle in (b.title or "").lower()
                or needle in (b.description or "").lower()
                or search in (b.tags or [])
            ]
        return books

    @staticmethod
    def list_user_published(user_id: int):
        return BookRepo.list_published(author_id=user_id)
