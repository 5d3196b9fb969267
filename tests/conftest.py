import datetime
import pytest

from inkwell import create_app
from inkwell.extensions import db
from inkwell.models.book import Book
from inkwell.services.auth_service import AuthService

NOW = datetime.datetime(2026, 1, 1, 12, 0, 0)

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "JWT_SECRET_KEY": "test-jwt-secret-key-that-is-long-enough-for-hs256",
    "SCHEDULER_ENABLED": False,
    "AUTO_CREATE_TABLES": True,
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    return AuthService.register("writer", "writer@example.com", "s3cret-pass", bio="hi")


@pytest.fixture
def other_user(app):
    return AuthService.register("reader", "reader@example.com", "another-pass")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {AuthService.issue_token(user)}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {AuthService.issue_token(other_user)}"}


def make_book(user_id, title="A Quiet Harbor", content="", published_at=None, **extra):
    book = Book(
        user_id=user_id,
        title=title,
        description=extra.pop("description", "A story about the sea"),
        content=content,
        created_at=NOW,
        last_saved_at=NOW,
        **extra,
    )
    if published_at is not None:
        book.is_published = True
        book.published_at = published_at
        book.genre = ["Fiction"]
    db.session.add(book)
    db.session.commit()
    return book


def publish_payload(**overrides):
    data = {
        "title": "A Quiet Harbor",
        "description": "A story about the sea",
        "content": "x" * 6000,
        "genre": ["Fiction"],
    }
    data.update(overrides)
    return data
