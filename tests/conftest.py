import os
import tempfile
from decimal import Decimal

# konfiguracja przed importem bookshop (settings czytane przy imporcie)
_TMP_DIR = tempfile.mkdtemp(prefix="bookshop-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import pytest
from fastapi.testclient import TestClient

from bookshop.data.database import Base, SessionLocal, engine
from bookshop.data.models import BookModel, GenreModel, UserModel
from bookshop.main import app


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(email="reader@example.com", username="reader"):
        user = UserModel(email=email, username=username)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_genre(db):
    def _make(name="Programming"):
        genre = GenreModel(name=name)
        db.add(genre)
        db.commit()
        db.refresh(genre)
        return genre
    return _make


@pytest.fixture
def make_book(db, make_genre):
    def _make(title, price="10.00", stock=5, genre=None, **extra):
        genre = genre or make_genre(f"Genre for {title}")
        book = BookModel(
            title=title,
            writer=extra.pop("writer", "Some Writer"),
            publisher=extra.pop("publisher", "Some Publisher"),
            publication_year=extra.pop("publication_year", 2015),
            price=Decimal(price),
            stock_quantity=stock,
            genre_id=genre.id,
            **extra,
        )
        db.add(book)
        db.commit()
        db.refresh(book)
        return book
    return _make


@pytest.fixture
def stock_of(db):
    def _stock(book_id):
        db.expire_all()
        return db.get(BookModel, book_id).stock_quantity
    return _stock


@pytest.fixture
def auth(make_user):
    user = make_user()
    return {"X-User-Id": str(user.id)}
