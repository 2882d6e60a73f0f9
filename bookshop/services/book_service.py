# bookshop/services/book_service.py
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshop.data.models.book import BookModel
from bookshop.domain.errors import BookNotFound, DuplicateTitle, GenreNotFound
from bookshop.domain.schemas import BookCreate, BookList, BookOut, BookUpdate, GenreBookList, GenreRef
from bookshop.repos.book_repo import BookRepo
from bookshop.repos.genre_repo import GenreRepo
from bookshop.utils.logging import get_logger
from bookshop.utils.pagination import page_window, pagination_meta

logger = get_logger(__name__)


class BookService:
    """
    Use case'y katalogu ksiazek.
    commands (create, update, delete) modyfikuja katalog,
    query (get, list) tylko odczyt aktywnych ksiazek
    """

    def __init__(self, db: Session):
        self.repo = BookRepo(db)
        self.genres = GenreRepo(db)

    #query
    def get_book(self, book_id: int) -> BookOut:
        book = self.repo.get_book(book_id)
        if not book:
            raise BookNotFound([book_id])
        return BookOut.model_validate(book)

    def list_books(
        self,
        search: str | None = None,
        genre_id: int | None = None,
        min_price=None,
        max_price=None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int | None = 1,
        limit: int | None = None,
    ) -> BookList:
        page, limit, offset = page_window(page, limit)
        books, total = self.repo.list_books(
            search=search,
            genre_id=genre_id,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            sort_order=sort_order,
            offset=offset,
            limit=limit,
        )
        return BookList(
            books=[BookOut.model_validate(b) for b in books],
            pagination=pagination_meta(page, limit, total),
        )

    def list_books_by_genre(self, genre_id: int, **filters) -> GenreBookList:
        genre = self.genres.get_genre(genre_id)
        if not genre:
            raise GenreNotFound(genre_id)
        listing = self.list_books(genre_id=genre_id, **filters)
        return GenreBookList(
            genre=GenreRef.model_validate(genre),
            books=listing.books,
            pagination=listing.pagination,
        )

    #commands
    def create_book(self, payload: BookCreate) -> BookOut:
        if not self.genres.get_genre(payload.genre_id):
            raise GenreNotFound(payload.genre_id)

        if self.repo.get_book_by_title(payload.title):
            raise DuplicateTitle(payload.title)

        try:
            created = self.repo.create_book(BookModel(**payload.model_dump()))
        except IntegrityError as e:
            #rownolegly insert z tym samym tytulem
            raise DuplicateTitle(payload.title) from e
        logger.info(f"Book {created.id} created: {created.title}")
        return self.get_book(created.id)

    def update_book(self, book_id: int, payload: BookUpdate) -> BookOut:
        book = self.repo.get_book(book_id)
        if not book:
            raise BookNotFound([book_id])

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "title" in changes and changes["title"] != book.title:
            if self.repo.get_book_by_title(changes["title"]):
                raise DuplicateTitle(changes["title"])

        if "genre_id" in changes and not self.genres.get_genre(changes["genre_id"]):
            raise GenreNotFound(changes["genre_id"])

        for field, value in changes.items():
            setattr(book, field, value)

        try:
            self.repo.save(book)
        except IntegrityError as e:
            raise DuplicateTitle(changes.get("title", book.title)) from e
        logger.info(f"Book {book_id} updated: {sorted(changes)}")
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> None:
        book = self.repo.get_book(book_id)
        if not book:
            raise BookNotFound([book_id])

        #soft delete, zamowienia dalej wskazuja na ksiazke
        book.deleted_at = datetime.now(timezone.utc)
        self.repo.save(book)
        logger.info(f"Book {book_id} soft-deleted")
