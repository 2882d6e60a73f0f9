# bookshop/repos/genre_repo.py
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshop.data.models.genre import GenreModel


class GenreRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_genre(self, genre_id: int) -> Optional[GenreModel]:
        return self.db.execute(
            select(GenreModel).where(
                GenreModel.id == genre_id,
                GenreModel.deleted_at.is_(None),
            )
        ).scalar_one_or_none()

    def get_genre_by_name(self, name: str) -> Optional[GenreModel]:
        return self.db.execute(
            select(GenreModel).where(GenreModel.name == name)
        ).scalar_one_or_none()

    def create_genre(self, genre: GenreModel) -> GenreModel:
        return self.save(genre)

    def save(self, genre: GenreModel) -> GenreModel:
        self.db.add(genre)
        try:
            self.db.commit()
        except IntegrityError:
            #naruszenie unique - sesja musi wrocic do stanu sprzed flush
            self.db.rollback()
            raise
        self.db.refresh(genre)
        return genre

    def list_genres(
        self,
        search: str | None = None,
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[GenreModel], int]:
        conditions = [GenreModel.deleted_at.is_(None)]
        if search:
            conditions.append(func.lower(GenreModel.name).like(f"%{search.lower()}%"))

        ordering = GenreModel.created_at.asc() if sort_order == "asc" else GenreModel.created_at.desc()

        total = self.db.execute(
            select(func.count(GenreModel.id)).where(*conditions)
        ).scalar_one()
        genres = self.db.execute(
            select(GenreModel)
            .where(*conditions)
            .order_by(ordering, GenreModel.id)
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(genres), total
