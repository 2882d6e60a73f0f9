# bookshop/services/genre_service.py
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshop.data.models.genre import GenreModel
from bookshop.domain.errors import DuplicateGenre, GenreInUse, GenreNotFound
from bookshop.domain.schemas import GenreOut, GenreRef
from bookshop.repos.book_repo import BookRepo
from bookshop.repos.genre_repo import GenreRepo
from bookshop.utils.logging import get_logger
from bookshop.utils.pagination import page_window

logger = get_logger(__name__)


class GenreService:
    def __init__(self, db: Session):
        self.repo = GenreRepo(db)
        self.books = BookRepo(db)

    def get_genre(self, genre_id: int) -> GenreRef:
        genre = self.repo.get_genre(genre_id)
        if not genre:
            raise GenreNotFound(genre_id)
        return GenreRef.model_validate(genre)

    def list_genres(
        self,
        search: str | None = None,
        sort_order: str = "desc",
        page: int | None = 1,
        limit: int | None = None,
    ) -> Tuple[List[GenreRef], dict]:
        page, limit, offset = page_window(page, limit)
        genres, total = self.repo.list_genres(search=search, sort_order=sort_order, offset=offset, limit=limit)
        meta = {
            "page": page,
            "limit": limit,
            "prev_page": page - 1 if page > 1 else None,
            "next_page": page + 1 if offset + len(genres) < total else None,
        }
        return [GenreRef.model_validate(g) for g in genres], meta

    def create_genre(self, name: str) -> GenreOut:
        if self.repo.get_genre_by_name(name):
            raise DuplicateGenre(name)

        try:
            created = self.repo.create_genre(GenreModel(name=name))
        except IntegrityError as e:
            raise DuplicateGenre(name) from e
        logger.info(f"Genre {created.id} created: {created.name}")
        return GenreOut.model_validate(created)

    def update_genre(self, genre_id: int, name: str) -> GenreOut:
        genre = self.repo.get_genre(genre_id)
        if not genre:
            raise GenreNotFound(genre_id)

        if name != genre.name and self.repo.get_genre_by_name(name):
            raise DuplicateGenre(name)

        genre.name = name
        try:
            self.repo.save(genre)
        except IntegrityError as e:
            raise DuplicateGenre(name) from e
        logger.info(f"Genre {genre_id} renamed to {name}")
        return GenreOut.model_validate(genre)

    def delete_genre(self, genre_id: int) -> None:
        genre = self.repo.get_genre(genre_id)
        if not genre:
            raise GenreNotFound(genre_id)

        #nie mozna usunac gatunku z aktywnymi ksiazkami
        book_count = self.books.count_active_by_genre(genre_id)
        if book_count > 0:
            raise GenreInUse(genre_id, book_count)

        genre.deleted_at = datetime.now(timezone.utc)
        self.repo.save(genre)
        logger.info(f"Genre {genre_id} soft-deleted")
