# inkwell/services/publishing_service.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from flask import current_app

from inkwell.errors import NotFoundError, RateLimitError, ValidationError
from inkwell.repositories.book_repo import BookRepo
from inkwell.utils.clock import utcnow

MAX_BOOKS_PER_DAY = 2
MIN_CHARACTER_COUNT = 5000
PUBLISH_WINDOW = timedelta(hours=24)

DEFAULT_LANGUAGE = "English"
DEFAULT_LICENSE = "All rights reserved"

BANNED_TITLE_PHRASES = (
    "READ THIS NOW!",
    "You won't believe...",
    "Shocking secret",
    "This will blow your mind",
    "Must read!",
    "What happens next will shock you",
    "Top 10 reasons",
    "The ultimate guide",
    "Don't miss this",
    "Guaranteed results",
    "Click here",
    "Buy now",
    "MUST READ THIS NOW!",
    "FREE GIFT",
    "Limited time offer",
    "Act fast",
    "Last chance",
    "Exclusive deal",
    "Unbelievable offer",
)
_BANNED_LOWER = tuple(p.lower() for p in BANNED_TITLE_PHRASES)

DRAFT_FIELDS = ("content", "title", "description")
# Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")


def _pick(data: dict, *keys):
    for k in keys:
        if k in data:
            return data[k]
    return None


def _payload(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", reason="invalid_field")
    return data


def _text(value, name: str):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", reason="invalid_field")
    return value


def _str_list(value, name: str) -> list[str]:
    """Tekrarsız, boş olmayan string listesi (sıra korunur)."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set)):
        raise ValidationError(f"{name} must be a list of strings", reason="invalid_field")
    out = []
    for v in value:
        if not isinstance(v, str) or not v.strip():
            raise ValidationError(f"{name} items must be non-empty strings", reason="invalid_field")
        s = v.strip()
        if s not in out:
            out.append(s)
    return out


def _flag(value, name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false", reason="invalid_field")
    return value


def _price(value):
    if value is None or value == "":
        return None
    try:
        price = Decimal(str(value)).quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError("price must be a number", reason="invalid_field")
    if price < 0:
        raise ValidationError("price cannot be negative", reason="invalid_field")
    if price > MAX_PRICE:
        raise ValidationError(f"price cannot exceed {MAX_PRICE}", reason="invalid_field")
    return price


@dataclass
class ProposedFields:
    title: str | None = None
    description: str | None = None
    content: str | None = None
    subtitle: str | None = None
    synopsis: str | None = None
    genre: list = field(default_factory=list)
    tags: list = field(default_factory=list)
    cover_image: str | None = None
    language: str = DEFAULT_LANGUAGE
    license: str = DEFAULT_LICENSE
    is_monetized: bool = False
    price: Decimal | None = None

    @classmethod
    def from_payload(cls, data: dict) -> "ProposedFields":
        """Accepts both the camelCase API keys and snake_case keys."""
        data = _payload(data)
        is_monetized = _flag(_pick(data, "is_monetized", "isMonetized"), "isMonetized")
        return cls(
            title=_text(_pick(data, "title"), "title"),
            description=_text(_pick(data, "description"), "description"),
            content=_text(_pick(data, "content"), "content"),
            subtitle=_text(_pick(data, "subtitle"), "subtitle") or None,
            synopsis=_text(_pick(data, "synopsis"), "synopsis") or None,
            genre=_str_list(_pick(data, "genre"), "genre"),
            tags=_str_list(_pick(data, "tags"), "tags"),
            cover_image=_text(_pick(data, "cover_image", "coverImage"), "coverImage") or None,
            language=_text(_pick(data, "language"), "language") or DEFAULT_LANGUAGE,
            license=_text(_pick(data, "license"), "license") or DEFAULT_LICENSE,
            is_monetized=is_monetized,
            price=_price(_pick(data, "price")) if is_monetized else None,
        )


def has_banned_phrase(title: str | None) -> bool:
    lowered = (title or "").lower()
    return any(p in lowered for p in _BANNED_LOWER)


class PublishingService:
    @staticmethod
    def get_publish_limit_status(user_id: int, now: datetime | None = None) -> dict:
        now = now or utcnow()
        count = BookRepo.count_published_since(user_id, now - PUBLISH_WINDOW)
        return {
            "count": count,
            "remaining": max(0, MAX_BOOKS_PER_DAY - count),
            "limit": MAX_BOOKS_PER_DAY,
        }

    @staticmethod
    def _check_rate_limit(user_id: int, now: datetime):
        since = now - PUBLISH_WINDOW
        count = BookRepo.count_published_since(user_id, since)
        if count < MAX_BOOKS_PER_DAY:
            return

        # count limiti aşmış olabilir (soft limit): count - limit + 1 yayın pencereden çıkmalı
        freeing = BookRepo.nth_oldest_published_since(user_id, since, count - MAX_BOOKS_PER_DAY + 1)
        retry_after = 0
        if freeing is not None:
            retry_after = max(0, math.ceil((freeing + PUBLISH_WINDOW - now).total_seconds()))
        raise RateLimitError(
            f"You can only publish {MAX_BOOKS_PER_DAY} books per 24 hours",
            count=count,
            limit=MAX_BOOKS_PER_DAY,
            retry_after_seconds=retry_after,
        )

    @staticmethod
    def publish(book_id: int, user_id: int, data: dict, now: datetime | None = None):
        """
        Sıra önemli, ilk başarısız kontrol kazanır:
        yasaklı başlık -> içerik uzunluğu -> 24 saat limiti -> kitap/sahiplik -> zorunlu alanlar.
        Tüm kontroller geçmeden kitaba dokunulmaz.
        """
        now = now or utcnow()
        fields = ProposedFields.from_payload(data)

        if has_banned_phrase(fields.title):
            raise ValidationError("Title contains phrases that are not allowed", reason="banned_title")

        if len(fields.content or "") < MIN_CHARACTER_COUNT:
            raise ValidationError(
                f"Book must be at least {MIN_CHARACTER_COUNT} characters long",
                reason="content_too_short",
            )

        PublishingService._check_rate_limit(user_id, now)

        book = BookRepo.get_owned(book_id, user_id, deleted=False)
        if not book:
            raise NotFoundError("Book not found or already deleted")

        if not fields.title or not fields.description or not fields.genre:
            raise ValidationError(
                "Title, description and at least one genre are required",
                reason="missing_fields",
            )
        if fields.is_monetized and fields.price is None:
            raise ValidationError("price is required for monetized books", reason="missing_fields")

        book.title = fields.title
        book.description = fields.description
        book.content = fields.content
        book.subtitle = fields.subtitle
        book.synopsis = fields.synopsis
        book.genre = fields.genre
        book.tags = fields.tags
        book.cover_image = fields.cover_image
        book.language = fields.language
        book.license = fields.license
        book.is_monetized = fields.is_monetized
        book.price = fields.price if fields.is_monetized else None

        book.is_published = True
        book.published_at = now
        book.last_saved_at = now

        BookRepo.update()
        current_app.logger.info(f"[publish] book={book.id} user={user_id} published")
        return book

    @staticmethod
    def save_draft(book_id: int, user_id: int, data: dict, now: datetime | None = None):
        # autosave: uzunluk/limit kontrolü yok
        now = now or utcnow()
        data = _payload(data)
        book = BookRepo.get_owned(book_id, user_id, deleted=False)
        if not book:
            raise NotFoundError("Book not found or already deleted")

        # önce hepsini doğrula, sonra yaz
        changes = {}
        for k in DRAFT_FIELDS:
            value = _text(data.get(k), k)
            if value is None:
                continue
            if k != "content" and not value.strip():
                raise ValidationError(f"{k} cannot be empty", reason="invalid_field")
            changes[k] = value

        for k, value in changes.items():
            setattr(book, k, value)

        book.last_saved_at = now
        BookRepo.update()
        return book
