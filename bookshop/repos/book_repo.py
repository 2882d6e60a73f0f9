# bookshop/repos/book_repo.py
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookshop.data.models.book import BookModel

SORTABLE_FIELDS = {
    "created_at": BookModel.created_at,
    "title": BookModel.title,
    "price": BookModel.price,
    "publication_year": BookModel.publication_year,
    "stock_quantity": BookModel.stock_quantity,
}


class BookRepo:
    """
    Catalog store: odczyt aktywnych ksiazek, zapis katalogu
    i warunkowe zmniejszanie stanu magazynowego.
    """

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return select(BookModel).where(BookModel.deleted_at.is_(None))

    # =====================================================
    # rezerwacja
    # =====================================================
    def find_books_by_ids(self, ids: Sequence[int], lock: bool = False) -> List[BookModel]:
        stmt = (
            self._active()
            .where(BookModel.id.in_(sorted(set(ids))))
            .order_by(BookModel.id)
            .execution_options(populate_existing=True)
        )
        if lock:
            #SELECT ... FOR UPDATE, wiersze blokowane rosnaco po id -> brak deadlockow
            stmt = stmt.with_for_update()
        return list(self.db.execute(stmt).scalars().all())

    def get_book(self, book_id: int) -> Optional[BookModel]:
        stmt = (
            self._active()
            .where(BookModel.id == book_id)
            .options(selectinload(BookModel.genre))
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def decrement_stock(self, book_id: int, amount: int) -> bool:
        # UPDATE books SET stock_quantity = stock_quantity - 3
        # WHERE id = 1 AND stock_quantity >= 3 AND deleted_at IS NULL
        result = self.db.execute(
            update(BookModel)
            .where(
                BookModel.id == book_id,
                BookModel.deleted_at.is_(None),
                BookModel.stock_quantity >= amount,
            )
            .values(stock_quantity=BookModel.stock_quantity - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # =====================================================
    # katalog
    # =====================================================
    def get_book_by_title(self, title: str) -> Optional[BookModel]:
        # tytul unikalny globalnie, takze wsrod usunietych
        return self.db.execute(
            select(BookModel).where(BookModel.title == title)
        ).scalar_one_or_none()

    def create_book(self, book: BookModel) -> BookModel:
        return self.save(book)

    def save(self, book: BookModel) -> BookModel:
        self.db.add(book)
        try:
            self.db.commit()
        except IntegrityError:
            #naruszenie unique - sesja musi wrocic do stanu sprzed flush
            self.db.rollback()
            raise
        self.db.refresh(book)
        return book

    def count_active_by_genre(self, genre_id: int) -> int:
        return self.db.execute(
            select(func.count(BookModel.id)).where(
                BookModel.genre_id == genre_id,
                BookModel.deleted_at.is_(None),
            )
        ).scalar_one()

    def list_books(
        self,
        search: str | None = None,
        genre_id: int | None = None,
        min_price=None,
        max_price=None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[BookModel], int]:
        conditions = [BookModel.deleted_at.is_(None)]

        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(BookModel.title).like(pattern),
                    func.lower(BookModel.writer).like(pattern),
                    func.lower(BookModel.publisher).like(pattern),
                )
            )
        if genre_id is not None:
            conditions.append(BookModel.genre_id == genre_id)
        if min_price is not None:
            conditions.append(BookModel.price >= min_price)
        if max_price is not None:
            conditions.append(BookModel.price <= max_price)

        column = SORTABLE_FIELDS.get(sort_by, BookModel.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        total = self.db.execute(
            select(func.count(BookModel.id)).where(*conditions)
        ).scalar_one()

        books = self.db.execute(
            select(BookModel)
            .where(*conditions)
            .options(selectinload(BookModel.genre))
            .order_by(ordering, BookModel.id)
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(books), total
